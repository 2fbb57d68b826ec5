import logging
import struct
import sys
from collections import namedtuple

from errors import FileIOError, MalformedContainerError
from huffman_tree import Leaf, Node

logger = logging.getLogger(__name__)

# --- CONSTANTS ---
MARKER_EXTENSION = "huff"
MARKER_SUFFIX = "." + MARKER_EXTENSION

MAGIC = b"HUFF"
LEAF_TAG = 0x00
NODE_TAG = 0x01

SYMBOL_FORMAT = struct.Struct(">I")     # leaf code point
BIT_COUNT_FORMAT = struct.Struct(">Q")  # unpadded bit count

Container = namedtuple("Container", ["tree", "bit_count", "payload"])


### PATH CONVENTION ###
def compressed_path_for(original_path):
    return str(original_path) + MARKER_SUFFIX


def original_path_for(compressed_path):
    """Strips exactly the marker suffix from ``compressed_path``."""
    compressed_path = str(compressed_path)
    if not compressed_path.endswith(MARKER_SUFFIX) or compressed_path == MARKER_SUFFIX:
        raise MalformedContainerError(
            f"Input file must have the '{MARKER_SUFFIX}' extension: {compressed_path}")
    return compressed_path[:-len(MARKER_SUFFIX)]


### ENCODING ###
def dump_container(container):
    """
    Serializes a container to bytes.

    Layout (big-endian): MAGIC, the tree in pre-order (NODE_TAG, or LEAF_TAG
    followed by the code point), the unpadded bit count, then the payload.
    """
    out = bytearray(MAGIC)

    stack = [container.tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Leaf):
            out.append(LEAF_TAG)
            out += SYMBOL_FORMAT.pack(node.symbol)
        else:
            out.append(NODE_TAG)
            stack.append(node.right)
            stack.append(node.left)

    out += BIT_COUNT_FORMAT.pack(container.bit_count)
    out += container.payload
    return bytes(out)


### DECODING ###
def _read_tree(blob, offset):
    """Rebuilds the pre-order tree starting at ``offset``; returns (tree, offset)."""
    pending = []  # children collected so far for each open internal node
    seen = set()

    while True:
        if offset >= len(blob):
            raise MalformedContainerError("Tree truncated")
        tag = blob[offset]
        offset += 1

        if tag == NODE_TAG:
            pending.append([])
            continue
        if tag != LEAF_TAG:
            raise MalformedContainerError(f"Unknown tree tag 0x{tag:02x} at byte {offset - 1}")

        if offset + SYMBOL_FORMAT.size > len(blob):
            raise MalformedContainerError("Tree truncated (leaf symbol)")
        (symbol,) = SYMBOL_FORMAT.unpack_from(blob, offset)
        offset += SYMBOL_FORMAT.size
        # Surrogates cannot be written back out as UTF-8
        if symbol > sys.maxunicode or 0xD800 <= symbol <= 0xDFFF:
            raise MalformedContainerError(f"Leaf symbol {symbol} is not a valid code point")
        if symbol in seen:
            raise MalformedContainerError(f"Symbol {symbol} appears in more than one leaf")
        seen.add(symbol)

        node = Leaf(symbol)
        # Close every internal node that now has both children
        while pending:
            children = pending[-1]
            children.append(node)
            if len(children) < 2:
                break
            pending.pop()
            node = Node(children[0], children[1])
        else:
            return node, offset


def load_container(blob):
    """Parses bytes produced by dump_container. Raises MalformedContainerError."""
    if blob[:len(MAGIC)] != MAGIC:
        raise MalformedContainerError("Not a Huffman container (bad magic)")

    tree, offset = _read_tree(blob, len(MAGIC))

    if offset + BIT_COUNT_FORMAT.size > len(blob):
        raise MalformedContainerError("Header truncated (bit count)")
    (bit_count,) = BIT_COUNT_FORMAT.unpack_from(blob, offset)
    offset += BIT_COUNT_FORMAT.size
    if bit_count == 0:
        raise MalformedContainerError("Container holds no encoded bits")

    payload = bytes(blob[offset:])
    expected = (bit_count + 7) // 8
    if len(payload) != expected:
        raise MalformedContainerError(
            f"Payload is {len(payload)} bytes, expected {expected} for {bit_count} bits")

    return Container(tree, bit_count, payload)


### FILE I/O ###
def write_container(container, original_path):
    """Writes the container next to ``original_path``; returns (path, size)."""
    output_path = compressed_path_for(original_path)
    blob = dump_container(container)
    try:
        with open(output_path, "wb") as f:
            f.write(blob)
    except OSError as e:
        raise FileIOError(f"Could not write {output_path}: {e}") from e

    logger.debug("Wrote %d container bytes to %s", len(blob), output_path)
    return output_path, len(blob)


def read_container(compressed_path):
    """Reads a container file; returns (container, original path)."""
    original_path = original_path_for(compressed_path)
    try:
        with open(compressed_path, "rb") as f:
            blob = f.read()
    except OSError as e:
        raise FileIOError(f"Could not read {compressed_path}: {e}") from e

    logger.debug("Read %d container bytes from %s", len(blob), compressed_path)
    return load_container(blob), original_path
