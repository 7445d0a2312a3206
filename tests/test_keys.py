"""Tests for catalog key generation."""

from zhpick.keys import key_for, string_hash


class TestStringHash:
    def test_empty_string(self):
        assert string_hash("") == 0

    def test_matches_polynomial_hash(self):
        assert string_hash("a") == 97
        assert string_hash("ab") == 97 * 31 + 98
        assert string_hash("hello") == 99162322

    def test_wraps_as_signed_32_bit(self):
        assert string_hash("polygenelubricants") == -(2**31)

    def test_chinese_uses_utf16_code_units(self):
        assert string_hash("你好") == 0x4F60 * 31 + 0x597D

    def test_astral_characters_hash_as_surrogate_pairs(self):
        assert string_hash("\U0001F600") == 0xD83D * 31 + 0xDE00


class TestKeyFor:
    def test_known_keys(self):
        assert key_for("") == "AAAAAA"
        assert key_for("a") == "YQAAAA"
        assert key_for("你好") == "HfYJAA"

    def test_negative_hash(self):
        assert key_for("polygenelubricants") == "AAAAgA"

    def test_leading_digit_gets_prefix(self):
        assert key_for("Ð") == "_0AAAAA"

    def test_dash_is_replaced(self):
        key = key_for("ø")
        assert key == "_AAAAA"
        assert "-" not in key

    def test_deterministic(self):
        assert key_for("你好世界") == key_for("你好世界")
        assert key_for("你好世界") != key_for("世界你好")
