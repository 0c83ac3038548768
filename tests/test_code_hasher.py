import pytest


def test_verify_round_trip(fast_hasher):
    for plain in ["000000", "123456", "999999"]:
        assert fast_hasher.verify(plain, fast_hasher.hash(plain)) is True


def test_verify_rejects_other_codes(fast_hasher):
    digest = fast_hasher.hash("123456")
    for other in ["123457", "654321", "000000", "12345", ""]:
        assert fast_hasher.verify(other, digest) is False


def test_hash_is_salted_and_not_plaintext(fast_hasher):
    first = fast_hasher.hash("424242")
    second = fast_hasher.hash("424242")
    assert first != second
    assert first != "424242"
    assert first.startswith("$2")


@pytest.mark.parametrize("digest", ["", "not-a-hash", "$2b$04$short", "424242"])
def test_malformed_digest_returns_false(fast_hasher, digest):
    assert fast_hasher.verify("424242", digest) is False


def test_non_string_input_returns_false(fast_hasher):
    digest = fast_hasher.hash("424242")
    assert fast_hasher.verify(None, digest) is False
    assert fast_hasher.verify(424242, digest) is False
    assert fast_hasher.verify("424242", None) is False
