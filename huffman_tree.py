import heapq
from collections import Counter

from errors import EmptyInputError

# Directions taken from a node to its children
LEFT = "0"
RIGHT = "1"


### HUFFMAN NODE CLASSES ###
class Leaf:
    """A single symbol (its code point) and how often it occurs.

    Only trees built by build_tree carry weights. A tree read back from a
    container has weight 0 on every node, since the counts are not stored.
    """
    def __init__(self, symbol, weight=0):
        self.symbol = symbol
        self.weight = weight

    def __repr__(self):
        return f"Leaf({self.symbol!r}, {self.weight})"


class Node:
    """Internal node. Owns both of its children."""
    def __init__(self, left, right):
        self.left = left
        self.right = right
        self.weight = left.weight + right.weight

    def __repr__(self):
        return f"Node({self.left!r}, {self.right!r})"


### FREQUENCY COUNTING ###
def frequency_table(text):
    """Counts how often each code point occurs in ``text``.

    Returns a dict of code point -> count. Raises EmptyInputError for an
    empty text before anything else is done.
    """
    if not text:
        raise EmptyInputError("No content to compress")
    return dict(Counter(map(ord, text)))


### TREE CONSTRUCTION ###
def build_tree(frequencies):
    """
    Builds the Huffman tree by repeatedly merging the two lightest elements.

    Heap entries are (weight, order, node). Leaves enter in ascending code
    point order and merged nodes take the next order number when created, so
    equal weights are resolved by insertion order and the resulting tree is
    the same on every run.
    """
    priority_queue = []
    order = 0
    for symbol in sorted(frequencies):
        freq = frequencies[symbol]
        if freq > 0:
            priority_queue.append((freq, order, Leaf(symbol, freq)))
            order += 1

    if not priority_queue:
        raise EmptyInputError("Frequency table has no symbols")
    heapq.heapify(priority_queue)

    # A single distinct symbol never merges: the leaf is the root
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged = Node(left, right)
        heapq.heappush(priority_queue, (merged.weight, order, merged))
        order += 1

    return priority_queue[0][2]


def iter_leaves(tree):
    """Yields the leaves left to right."""
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            yield node
        else:
            stack.append(node.right)
            stack.append(node.left)


### CODE GENERATION ###
def build_codeword_tables(tree):
    """
    Walks the tree once and returns (codes, inverse): symbol -> codeword and
    codeword -> symbol. Uses an explicit stack, so skewed trees with many
    symbols do not hit the recursion limit.

    A tree made of one leaf gives that symbol the one-bit codeword LEFT.
    """
    codes = {}
    stack = [(tree, "")]
    while stack:
        node, current_code = stack.pop()
        if isinstance(node, Leaf):
            codes[node.symbol] = current_code or LEFT
            continue
        stack.append((node.right, current_code + RIGHT))
        stack.append((node.left, current_code + LEFT))

    inverse = {code: symbol for symbol, code in codes.items()}
    return codes, inverse
