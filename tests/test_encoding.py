import os

import pytest

from lumina import InvalidEncoding, decode_hex, encode_hex, from_int_list, normalize_hex, to_int_list


class TestEncode:
    def test_empty(self):
        assert encode_hex(b"") == ""

    def test_lowercase_two_chars_per_byte(self):
        assert encode_hex(b"\x00\x0f\xab\xff") == "000fabff"

    def test_accepts_bytearray(self):
        assert encode_hex(bytearray(b"\x01\x02")) == "0102"


class TestDecode:
    def test_empty_string(self):
        assert decode_hex("") == b""

    def test_prefix_only(self):
        assert decode_hex("0x") == b""

    def test_whitespace_only(self):
        assert decode_hex("   ") == b""

    @pytest.mark.parametrize("text", ["ab", "AB", "0xab", "0XAB", "  0xAb\n"])
    def test_normalization(self, text):
        assert decode_hex(text) == b"\xab"

    def test_strips_only_one_prefix(self):
        with pytest.raises(InvalidEncoding, match="invalid character"):
            decode_hex("0x0xab")

    def test_odd_length(self):
        with pytest.raises(InvalidEncoding, match="odd length"):
            decode_hex("abc")

    def test_non_hex_character(self):
        with pytest.raises(InvalidEncoding, match="invalid character"):
            decode_hex("zz")

    def test_embedded_whitespace_is_invalid(self):
        with pytest.raises(InvalidEncoding, match="invalid character"):
            decode_hex("ab c")

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            decode_hex("0g")


class TestRoundTrip:
    @pytest.mark.parametrize("n", [0, 1, 2, 31, 32, 33, 64, 257])
    def test_decode_encode(self, n):
        data = os.urandom(n)
        assert decode_hex(encode_hex(data)) == data

    def test_every_byte_value(self):
        data = bytes(range(256))
        assert decode_hex(encode_hex(data)) == data

    @pytest.mark.parametrize("text", ["", "00", "deadBEEF", "0xCAFE", " 0102 "])
    def test_encode_decode_is_normalize(self, text):
        assert encode_hex(decode_hex(text)) == normalize_hex(text)


class TestIntLists:
    def test_to_int_list(self):
        assert to_int_list(b"\x00\x7f\xff") == [0, 127, 255]

    def test_from_int_list_masks(self):
        assert from_int_list([256, 257, -1]) == b"\x00\x01\xff"

    def test_round_trip(self):
        data = bytes(range(40))
        assert from_int_list(to_int_list(data)) == data
