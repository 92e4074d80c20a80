import string

from servkit.digest import hash_number, md5_hex


def test_crc32_check_value():
    assert hash_number("123456789") == 0xCBF43926


def test_hash_number_range_and_stability():
    for text in ["", "a", "hello", "字符串"]:
        value = hash_number(text)
        assert 0 <= value < 2**32
        assert value == hash_number(text)


def test_md5_known_digests():
    assert md5_hex("") == "d41d8cd98f00b204e9800998ecf8427e"
    assert md5_hex("abc") == "900150983cd24fb0d6963f7d28e17f72"


def test_md5_shape():
    digest = md5_hex("some text")
    assert len(digest) == 32
    assert set(digest) <= set(string.hexdigits.lower())
    assert md5_hex("some text") == digest
    assert md5_hex("other text") != digest or False