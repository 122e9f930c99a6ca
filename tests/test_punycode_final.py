"""Tests for the Bootstring/Punycode codec."""

from __future__ import annotations

import random
from typing import Optional

import pytest

import punycode_final
from punycode_final import (
    MAXINT,
    RFC3492_VECTORS,
    BootstringOverflowError,
    InvalidCodePointError,
    MalformedInputError,
    PunycodeError,
    adapt,
    decode,
    decode_digit,
    decode_digit_ignorecase,
    encode,
    encode_digit,
    threshold,
    try_decode,
    try_encode,
)


def _upper_encode_digit(digit: int) -> str:
    return chr(digit + 97) if digit < 26 else chr(digit + 39)


def _upper_decode_digit(c: str) -> Optional[int]:
    v = ord(c)
    if 65 <= v < 91:
        return v - 39
    if 97 <= v < 123:
        return v - 97
    return None


@pytest.mark.parametrize("name, text, puny", RFC3492_VECTORS, ids=[v[0] for v in RFC3492_VECTORS])
def test_rfc_vectors_encode(name: str, text: str, puny: str) -> None:
    assert encode(text) == puny


@pytest.mark.parametrize("name, text, puny", RFC3492_VECTORS, ids=[v[0] for v in RFC3492_VECTORS])
def test_rfc_vectors_decode(name: str, text: str, puny: str) -> None:
    assert decode(puny) == text


def test_ascii_only_gets_trailing_delimiter() -> None:
    assert encode("abc012") == "abc012-"
    assert decode("abc012-") == "abc012"


def test_empty_string() -> None:
    assert encode("") == ""
    assert decode("") == ""


def test_arabic_has_no_delimiter() -> None:
    arabic = RFC3492_VECTORS[0][1]
    assert encode(arabic) == "egbpdaj6bu4bxfgehfvwxn"
    assert "-" not in encode(arabic)


def test_czech_vector() -> None:
    text = "Pročprostěnemluvíčesky"
    assert encode(text) == "Proprostnemluvesky-uyb24dma41a"
    assert decode("Proprostnemluvesky-uyb24dma41a") == text


def test_custom_delimiter() -> None:
    assert encode("étoile", delimiter="_") == "toile_9ra"
    assert decode("toile_9ra", delimiter="_") == "étoile"


def test_custom_digit_codec() -> None:
    assert encode("étoile", encode_digit=_upper_encode_digit) == "toile-Jra"
    assert decode("toile-Jra", decode_digit=_upper_decode_digit) == "étoile"


def test_literal_prefix_may_contain_delimiter() -> None:
    text = "Hello-Another-Way-それぞれの場所"
    encoded = encode(text)
    assert encoded == "Hello-Another-Way--fc4qua05auwb3674vfr0b"
    assert decode(encoded) == text


def test_repeated_code_points_share_one_pass() -> None:
    # same extended value several times, interleaved with basics
    text = "überüüxü"
    assert decode(encode(text)) == text


def test_round_trip_random_text() -> None:
    rng = random.Random(1234)
    pools = [(0x20, 0x7E), (0xA0, 0x24F), (0x3040, 0x30FF), (0xAC00, 0xD7A3), (0x1F300, 0x1F5FF)]
    for delimiter in ("-", "_", "+"):
        for _ in range(25):
            chars = []
            for _ in range(rng.randint(1, 40)):
                lo, hi = rng.choice(pools)
                chars.append(chr(rng.randint(lo, hi)))
            text = "".join(chars)
            encoded = encode(text, delimiter=delimiter)
            assert all(ord(c) < 0x80 for c in encoded)
            assert decode(encoded, delimiter=delimiter) == text


def test_encode_is_deterministic() -> None:
    text = RFC3492_VECTORS[7][1]
    assert encode(text) == encode(text)


def test_default_digit_codec() -> None:
    assert [encode_digit(d) for d in (0, 25, 26, 35)] == ["a", "z", "0", "9"]
    assert decode_digit("a") == 0
    assert decode_digit("9") == 35
    assert decode_digit("A") is None
    assert decode_digit("-") is None


def test_ignorecase_digit_decoder() -> None:
    assert decode_digit_ignorecase("A") == 0
    assert decode_digit_ignorecase("Z") == 25
    assert decode_digit_ignorecase("5") == 31
    russian = RFC3492_VECTORS[8][1]
    assert decode("b1abfaaepdrnnbgefbaDotcwatmq2g4l", decode_digit=decode_digit_ignorecase) == russian


@pytest.mark.parametrize(
    "k, bias, expected",
    [
        (36, 72, 1),
        (72, 72, 1),
        (80, 72, 8),
        (98, 72, 26),
        (108, 72, 26),
    ],
)
def test_threshold_clamps(k: int, bias: int, expected: int) -> None:
    assert threshold(k, bias) == expected


def test_adapt_values() -> None:
    assert adapt(0, 1, True) == 0
    assert adapt(70000, 1, True) == 30
    assert adapt(1000, 1, False) == 51


def test_encode_overflow_on_long_input() -> None:
    text = "a" * 5000 + "\U0010FFFF"
    with pytest.raises(BootstringOverflowError):
        encode(text)
    assert try_encode(text) is None


def test_overflow_error_is_a_punycode_and_overflow_error() -> None:
    with pytest.raises(OverflowError):
        encode("a" * 5000 + "\U0010FFFF")
    assert issubclass(BootstringOverflowError, PunycodeError)
    assert issubclass(PunycodeError, ValueError)


def test_decode_overflow() -> None:
    with pytest.raises(BootstringOverflowError):
        decode("9" * 20)


def test_decode_truncated_digit_group() -> None:
    with pytest.raises(MalformedInputError):
        decode("toile_9r", delimiter="_")
    assert try_decode("toile_9r", delimiter="_") is None


def test_invalid_digit_reported_on_next_read() -> None:
    with pytest.raises(MalformedInputError):
        decode("toile-9!")


def test_decode_rejects_value_above_unicode_range() -> None:
    with pytest.raises(InvalidCodePointError):
        decode("9999g")


def test_decode_rejects_surrogate() -> None:
    with pytest.raises(InvalidCodePointError):
        decode("bb0c")


@pytest.mark.parametrize("delimiter", ["", "--", None])
def test_bad_delimiter(delimiter) -> None:
    with pytest.raises(ValueError):
        encode("abc", delimiter=delimiter)
    with pytest.raises(ValueError):
        decode("abc-", delimiter=delimiter)


def test_maxint_is_32_bit() -> None:
    assert MAXINT == 2**32 - 1


def test_self_test_passes() -> None:
    passes, fails = punycode_final.self_test()
    assert fails == 0
    assert passes == 2 * len(RFC3492_VECTORS)


def test_cli_encode(capsys) -> None:
    assert punycode_final.main(["étoile", "--delimiter", "_"]) == 0
    assert capsys.readouterr().out.strip() == "toile_9ra"


def test_cli_encode_code_points(capsys) -> None:
    assert punycode_final.main(["-u", "U+00E9 U+0074 U+006F U+0069 U+006C U+0065"]) == 0
    assert capsys.readouterr().out.strip() == "toile-9ra"


def test_cli_decode_code_points(capsys) -> None:
    assert punycode_final.main(["-d", "-u", "toile-9ra"]) == 0
    assert capsys.readouterr().out.strip() == "U+00E9 U+0074 U+006F U+0069 U+006C U+0065"


def test_cli_decode_ignore_case(capsys) -> None:
    assert punycode_final.main(["-d", "-i", "toile-9RA"]) == 0
    assert capsys.readouterr().out.strip() == "étoile"


def test_cli_reports_malformed_input(capsys) -> None:
    assert punycode_final.main(["-d", "toile-9r"]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_cli_selftest(capsys) -> None:
    assert punycode_final.main(["--selftest"]) == 0
    assert "failed 0" in capsys.readouterr().out
