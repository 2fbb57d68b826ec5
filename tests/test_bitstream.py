import pytest

from bitstream import decode_bits, encode_bits
from errors import MalformedStreamError
from huffman_tree import build_codeword_tables, build_tree, frequency_table


def _tables(text):
    return build_codeword_tables(build_tree(frequency_table(text)))


def test_aaabbc_packs_msb_first():
    codes, _ = _tables("aaabbc")
    payload, bit_count = encode_bits("aaabbc", codes)
    # 0 0 0 11 11 10 -> 000111110, padded with seven zeros
    assert bit_count == 9
    assert payload == bytes([0b00011111, 0b00000000])


@pytest.mark.parametrize("text", [
    "aaabbc",
    "a",
    "abcdefgh",          # eight 3-bit codes, byte aligned
    "hello, world\n" * 7,
    "naïve café ✓",
])
def test_bit_count_is_sum_of_codeword_lengths(text):
    codes, _ = _tables(text)
    payload, bit_count = encode_bits(text, codes)
    assert bit_count == sum(len(codes[ord(char)]) for char in text)

    padding = len(payload) * 8 - bit_count
    assert 0 <= padding < 8
    # Padding is all zero bits after the data
    assert (payload[-1] & ((1 << padding) - 1)) == 0


def test_byte_aligned_stream_gets_no_padding():
    codes, _ = _tables("abcdefgh")
    payload, bit_count = encode_bits("abcdefgh" * 2, codes)
    assert bit_count == 48
    assert len(payload) == 6


def test_single_symbol_costs_one_bit_each():
    codes, inverse = _tables("aaaa")
    payload, bit_count = encode_bits("aaaa", codes)
    assert bit_count == 4
    assert payload == b"\x00"
    assert decode_bits(payload, bit_count, inverse) == "aaaa"


def test_decode_ignores_padding():
    codes, inverse = _tables("aaabbc")
    payload, bit_count = encode_bits("aaabbc", codes)
    assert decode_bits(payload, bit_count, inverse) == "aaabbc"


def test_missing_codeword_is_an_internal_error():
    codes, _ = _tables("aaabbc")
    with pytest.raises(RuntimeError):
        encode_bits("abcd", codes)


def test_leftover_bits_are_reported():
    _, inverse = _tables("aaabbc")
    # "1" alone is the start of "10" or "11"
    with pytest.raises(MalformedStreamError):
        decode_bits(bytes([0b00010000]), 4, inverse)


def test_bit_count_beyond_payload_is_reported():
    _, inverse = _tables("aaabbc")
    with pytest.raises(MalformedStreamError):
        decode_bits(b"\x00", 9, inverse)


def test_unknown_path_in_single_leaf_stream_is_reported():
    _, inverse = _tables("aaaa")
    with pytest.raises(MalformedStreamError):
        decode_bits(bytes([0b01000000]), 4, inverse)


def test_corrupted_last_byte_never_drops_symbols():
    text = "the rain in spain stays mainly in the plain"
    codes, inverse = _tables(text)
    payload, bit_count = encode_bits(text, codes)
    padding = len(payload) * 8 - bit_count

    for mask in (0x01, 0x0F, 0xF0, 0xFF):
        corrupted = payload[:-1] + bytes([payload[-1] ^ mask])
        try:
            decoded = decode_bits(corrupted, bit_count, inverse)
        except MalformedStreamError:
            continue
        if mask >> padding == 0:
            # Only padding bits changed
            assert decoded == text
        else:
            assert decoded != text
