import logging
import sys
from collections import namedtuple

from bitstream import decode_bits, encode_bits
from container import (
    MARKER_SUFFIX,
    Container,
    read_container,
    write_container,
)
from errors import FileIOError, HuffmanError, UnencodableTextError
from huffman_tree import build_codeword_tables, build_tree, frequency_table

logger = logging.getLogger(__name__)

CompressionReport = namedtuple("CompressionReport", ["path", "original_size", "compressed_size"])


### CORE ENTRY POINTS ###
def compress(text):
    """
    Compresses ``text`` into a Container.

    Returns (container, original_byte_length), the length being the UTF-8
    size of the text. Raises EmptyInputError for an empty text and
    UnencodableTextError for text holding lone surrogates.
    """
    frequencies = frequency_table(text)
    try:
        original_size = len(text.encode("utf-8"))
    except UnicodeEncodeError as e:
        raise UnencodableTextError(f"Text cannot be stored as UTF-8: {e}") from e

    tree = build_tree(frequencies)
    codes, _ = build_codeword_tables(tree)
    payload, bit_count = encode_bits(text, codes)

    logger.debug("Encoded %d symbols (%d distinct) into %d bits",
                 len(text), len(frequencies), bit_count)
    return Container(tree, bit_count, payload), original_size


def serialize(container, path):
    """Writes ``container`` to ``path`` + '.huff'; returns (written_path, size)."""
    return write_container(container, path)


def deserialize(path):
    """Reads a '.huff' file; returns (container, original_path)."""
    return read_container(path)


def decompress(container):
    """Rebuilds the text held in ``container``. Raises MalformedStreamError."""
    _, inverse = build_codeword_tables(container.tree)
    return decode_bits(container.payload, container.bit_count, inverse)


### FILE HELPERS ###
def read_text(path):
    # newline="" keeps line endings byte-for-byte
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileIOError(f"Could not read {path}: {e}") from e


def write_text(path, text):
    # Encode before opening so a failure leaves no empty file behind
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise FileIOError(f"Could not write {path}: {e}") from e
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise FileIOError(f"Could not write {path}: {e}") from e


def is_compressed(path):
    return str(path).endswith(MARKER_SUFFIX)


def compress_file(input_path):
    """Compresses the text file at ``input_path`` into ``input_path`` + '.huff'."""
    text = read_text(input_path)
    container, original_size = compress(text)
    output_path, compressed_size = serialize(container, input_path)

    logger.info("Compressed %s (%d bytes) to %s (%d bytes)",
                input_path, original_size, output_path, compressed_size)
    return CompressionReport(output_path, original_size, compressed_size)


def decompress_file(compressed_path):
    """Restores a '.huff' file next to it, minus the suffix. Returns that path."""
    container, output_path = deserialize(compressed_path)
    text = decompress(container)
    write_text(output_path, text)

    logger.info("Decompressed %s to %s", compressed_path, output_path)
    return output_path


def saved_percent(original_size, compressed_size):
    if original_size == 0:
        return 0
    return round((original_size - compressed_size) / original_size * 100, 2)


def process_file(path):
    """
    Compresses or decompresses ``path`` depending on its extension and returns
    the status line to show the user.
    """
    if is_compressed(path):
        output_path = decompress_file(path)
        return f"Decompressed {path} to {output_path}"

    report = compress_file(path)
    return (f"Saved compressed file to {report.path} "
            f"({report.original_size} bytes -> {report.compressed_size} bytes, "
            f"{saved_percent(report.original_size, report.compressed_size)}% saved)")


### COMMAND LINE ###
def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if not args or args[0] in ("-h", "--help"):
        print("Usage: huff-text FILE [FILE ...]")
        print(f"Files ending in '{MARKER_SUFFIX}' are decompressed, anything else is compressed.")
        return 2 if not args else 0

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    failed = False
    for path in args:
        try:
            print(f"✅ {process_file(path)}")
        except HuffmanError as e:
            print(f"❌ {path}: {e}")
            failed = True
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
