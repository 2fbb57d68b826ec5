from errors import MalformedStreamError
from huffman_tree import LEFT


### BIT PACKING ###
def encode_bits(text, codes):
    """
    Encodes ``text`` with the codeword table ``codes`` (code point -> codeword).

    The codewords are concatenated in text order, padded with LEFT bits up to
    the next byte boundary and packed most significant bit first.
    Returns (payload, bit_count) where bit_count excludes the padding.
    """
    try:
        encoded = "".join(codes[ord(char)] for char in text)
    except KeyError as e:
        # The table was built from a different text
        raise RuntimeError(f"No codeword for symbol {e.args[0]!r}") from e

    bit_count = len(encoded)
    encoded += LEFT * (-bit_count % 8)

    payload = bytearray()
    for i in range(0, len(encoded), 8):
        payload.append(int(encoded[i:i + 8], 2))
    return bytes(payload), bit_count


### BIT UNPACKING ###
def decode_bits(payload, bit_count, inverse):
    """
    Decodes ``bit_count`` bits of ``payload`` with the inverse table
    (codeword -> code point) and returns the text.

    Raises MalformedStreamError if the bits do not split into whole codewords.
    """
    available = len(payload) * 8
    if bit_count > available:
        raise MalformedStreamError(
            f"Bit count {bit_count} exceeds the {available} bits in the payload")

    bit_string = "".join(format(byte, "08b") for byte in payload)
    bit_string = bit_string[:bit_count]  # drop the padding

    longest = max((len(code) for code in inverse), default=0)
    decoded_chars = []
    current_code = ""
    for position, bit in enumerate(bit_string):
        current_code += bit
        symbol = inverse.get(current_code)
        if symbol is not None:
            decoded_chars.append(chr(symbol))
            current_code = ""
        elif len(current_code) >= longest:
            raise MalformedStreamError(
                f"No codeword matches the bits ending at position {position}")

    if current_code:
        raise MalformedStreamError(
            f"Stream ends inside a codeword ({len(current_code)} bits left over)")

    return "".join(decoded_chars)
