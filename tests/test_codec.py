import pytest

from carevault.core.codec import DecodeResult, decode, encode, hash_text, try_decode


@pytest.mark.parametrize("text", [
    "",
    "Patient presents for routine annual physical.",
    "Lisinopril 10mg\nonce daily\t(30-day supply)",
    "Ünïcödé naïve café",
    "患者の記録",
    "Allergy: 🥜 peanuts",
])
def test_round_trip(text):
    assert decode(encode(text)) == text


def test_encode_is_base64_of_utf8():
    assert encode("hello") == "aGVsbG8="
    assert encode("é") == "w6k="


def test_empty_string_stays_empty():
    assert encode("") == ""
    assert decode("") == ""
    assert try_decode("") == DecodeResult(text="", ok=True)


@pytest.mark.parametrize("garbage", [
    "not base64!",
    "@@@@",
    "abcde",    # no valid base64 has this length
    "YQ==YQ==", # padding in the middle
    "/w==",     # valid base64, but 0xff is not UTF-8
    "naïve",    # non-ASCII input
])
def test_decode_fails_soft(garbage):
    """Malformed input comes back unchanged instead of raising."""
    assert decode(garbage) == garbage
    result = try_decode(garbage)
    assert result.ok is False
    assert result.text == garbage


def test_try_decode_distinguishes_success():
    assert try_decode(encode("note")) == DecodeResult(text="note", ok=True)


def test_encode_fails_soft_on_lone_surrogate():
    assert encode("\ud800") == "\ud800"


def test_hash_known_values():
    assert hash_text("") == "0"
    assert hash_text("a") == "2p"
    assert hash_text("ab") == "2e9"


def test_hash_is_deterministic_and_non_negative():
    text = "Blood Work - Complete Panel " * 50
    first = hash_text(text)
    assert first == hash_text(text)
    assert first.isalnum()
    assert not first.startswith("-")
    assert set(first) <= set("0123456789abcdefghijklmnopqrstuvwxyz")


def test_hash_differs_for_different_input():
    assert hash_text("P001") != hash_text("P002")


def test_hash_counts_surrogate_pairs_as_two_units():
    # One astral character hashes like its two UTF-16 code units
    assert hash_text("\U0001F95C") == hash_text("\ud83e\udd5c")
    assert hash_text("\U0001F95C") != hash_text("\ud83e")


def test_decode_restores_missing_padding():
    assert decode("YWI") == "ab"
    assert decode("YQ") == "a"
    assert try_decode("w6k") == DecodeResult(text="é", ok=True)


def test_decode_ignores_ascii_whitespace():
    """Line-wrapped encoded content still decodes."""
    assert try_decode("YW\nJj") == DecodeResult(text="abc", ok=True)
    wrapped = encode("Patient presents for routine annual physical.")
    wrapped = "\r\n".join(wrapped[i:i + 16] for i in range(0, len(wrapped), 16))
    assert decode(f" {wrapped}\t") == "Patient presents for routine annual physical."
