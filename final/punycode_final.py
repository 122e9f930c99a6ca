#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
punycode_final.py -- Bootstring/Punycode codec (RFC 3492).

This module converts between an arbitrary Unicode string and its
Punycode form: an ASCII-only string made of the *basic* (ASCII) code
points copied literally, a delimiter, and a stream of base‑36 digits
describing where the *extended* code points have to be inserted.

### Wire format

``[literal chars][delimiter if literal non-empty][digit chars]*``

The delimiter defaults to ``-``.  Digits are written with a pluggable
digit codec; the default maps 0–25 to ``a``–``z`` and 26–35 to
``0``–``9``.  A custom digit encoder must never produce the delimiter,
which is the caller's responsibility.

### Algorithm

Each extended code point is described by a single integer ``delta``
that combines "how far to advance the code point baseline ``n``" with
"where to insert it".  The deltas are written as generalized
variable‑length integers whose per‑position thresholds depend on a
``bias`` that is re‑adapted after every value (RFC 3492 §3.4).  Encoder
and decoder derive the same bias sequence from the same deltas, which
is what makes the format self‑synchronising.

All accumulators are checked against the unsigned 32‑bit range.  An
out of range computation raises ``BootstringOverflowError`` rather than
silently producing a different string.
"""

from __future__ import annotations

import sys
from typing import Callable, List, Optional, Tuple

###############################################################################
# Bootstring parameters
###############################################################################

BASE = 36
TMIN = 1
TMAX = 26
SKEW = 38
DAMP = 700
INITIAL_BIAS = 72
INITIAL_N = 0x80

MAXINT = 0xFFFFFFFF
MAX_CODE_POINT = 0x10FFFF
DIGITS = "abcdefghijklmnopqrstuvwxyz0123456789"

###############################################################################
# Errors
###############################################################################

class PunycodeError(ValueError):
    """Base class for every encode/decode failure."""

class BootstringOverflowError(PunycodeError, OverflowError):
    """An accumulator would leave the unsigned 32-bit range."""

class MalformedInputError(PunycodeError, EOFError):
    """The digit stream ends in the middle of a variable-length integer."""

class InvalidCodePointError(PunycodeError):
    """A decoded value is not a Unicode scalar value."""

###############################################################################
# Digit codec
###############################################################################

_DIGIT_VALUES = {c: d for d, c in enumerate(DIGITS)}

def encode_digit(d: int) -> str:
    """Map a digit value in ``[0, 36)`` to ``a``–``z``, ``0``–``9``."""
    return DIGITS[d]

def decode_digit(c: str) -> Optional[int]:
    """Inverse of :func:`encode_digit`; ``None`` for anything else.

    Case-sensitive: ``'A'`` is not a digit.  Use
    :func:`decode_digit_ignorecase` to accept both cases.
    """
    return _DIGIT_VALUES.get(c)

def decode_digit_ignorecase(c: str) -> Optional[int]:
    """Like :func:`decode_digit` but also accepts ``A``–``Z``."""
    if 'A' <= c <= 'Z':
        return ord(c) - ord('A')
    return _DIGIT_VALUES.get(c)

###############################################################################
# Bias adaptation
###############################################################################

def threshold(k: int, bias: int) -> int:
    """Threshold ``t`` for weight position ``k`` (a multiple of ``BASE``)."""
    if k <= bias:
        return TMIN
    if k >= bias + TMAX:
        return TMAX
    return k - bias

def adapt(delta: int, num_points: int, first_time: bool) -> int:
    """Recompute the bias after a delta has been coded (RFC 3492 §3.4).

    The first delta is scaled down by ``DAMP`` to soften the effect of
    the potentially large jump from ``INITIAL_N``; later ones by two.
    The result is then grown by ``delta / num_points`` to compensate for
    the next delta usually being spread over a longer string.
    """
    d = delta // DAMP if first_time else delta // 2
    d += d // num_points
    k = 0
    while d > ((BASE - TMIN) * TMAX) // 2:
        d //= BASE - TMIN
        k += BASE
    return k + ((BASE - TMIN + 1) * d) // (d + SKEW)

###############################################################################
# Encoding
###############################################################################

def _check_delimiter(delimiter: str) -> None:
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")

def encode(text: str, delimiter: str = '-',
           encode_digit: Callable[[int], str] = encode_digit) -> str:
    """Return the Punycode encoding of ``text``.

    ``encode_digit`` maps a digit value in ``[0, 36)`` to a character
    other than ``delimiter``.  Raises ``BootstringOverflowError`` if the
    input is long enough to push a delta past 32 bits.
    """
    _check_delimiter(delimiter)
    code_points = [ord(c) for c in text]
    out: List[str] = [c for c in text if ord(c) < 0x80]
    b = len(out)
    if b > 0:
        out.append(delimiter)

    n = INITIAL_N
    delta = 0
    bias = INITIAL_BIAS
    h = b
    while h < len(code_points):
        # smallest code point not yet handled
        m = min(p for p in code_points if p >= n)
        if m - n > (MAXINT - delta) // (h + 1):
            raise BootstringOverflowError(
                f"Delta overflow advancing to U+{m:04X} after {h} code points")
        delta += (m - n) * (h + 1)
        n = m

        for p in code_points:
            if p < n:
                if delta == MAXINT:
                    raise BootstringOverflowError("Delta overflow")
                delta += 1
            elif p == n:
                q = delta
                k = BASE
                while True:
                    t = threshold(k, bias)
                    if q < t:
                        break
                    out.append(encode_digit(t + (q - t) % (BASE - t)))
                    q = (q - t) // (BASE - t)
                    k += BASE
                out.append(encode_digit(q))
                bias = adapt(delta, h + 1, h == b)
                delta = 0
                h += 1

        delta += 1
        n += 1
    return ''.join(out)

def try_encode(text: str, delimiter: str = '-',
               encode_digit: Callable[[int], str] = encode_digit) -> Optional[str]:
    """Like :func:`encode` but returns ``None`` on overflow."""
    try:
        return encode(text, delimiter, encode_digit)
    except PunycodeError:
        return None

###############################################################################
# Decoding
###############################################################################

def decode(text: str, delimiter: str = '-',
           decode_digit: Callable[[str], Optional[int]] = decode_digit) -> str:
    """Return the string whose Punycode encoding is ``text``.

    Everything before the last ``delimiter`` is taken literally; the
    rest is read as digits through ``decode_digit``, which returns the
    digit value or ``None``.  A character that is not a digit is read as
    the value ``BASE``: it can never terminate an integer, so a stream
    containing one fails with ``MalformedInputError`` when the next
    digit is needed.  Raises ``BootstringOverflowError`` or
    ``InvalidCodePointError`` for values out of range.
    """
    _check_delimiter(delimiter)
    pos = text.rfind(delimiter)
    if pos == -1:
        output: List[int] = []
        h = 0
    else:
        output = [ord(c) for c in text[:pos]]
        h = pos + 1

    n = INITIAL_N
    i = 0
    bias = INITIAL_BIAS
    end = len(text)
    while h < end:
        old_i = i
        w = 1
        k = BASE
        while True:
            if h >= end:
                raise MalformedInputError(
                    f"Digit stream ends mid-integer at offset {h}")
            digit = decode_digit(text[h])
            if digit is None:
                digit = BASE
            h += 1
            if digit > (MAXINT - i) // w:
                raise BootstringOverflowError(f"Index overflow at offset {h - 1}")
            i += digit * w
            t = threshold(k, bias)
            if digit < t:
                break
            if w > MAXINT // (BASE - t):
                raise BootstringOverflowError(f"Weight overflow at offset {h - 1}")
            w *= BASE - t
            k += BASE

        size = len(output) + 1
        bias = adapt(i - old_i, size, old_i == 0)
        if i // size > MAXINT - n:
            raise BootstringOverflowError("Code point overflow")
        n += i // size
        i %= size
        if n > MAX_CODE_POINT or 0xD800 <= n <= 0xDFFF:
            raise InvalidCodePointError(f"Decoded value 0x{n:X} is not a Unicode scalar")
        output.insert(i, n)
        i += 1
    return ''.join(map(chr, output))

def try_decode(text: str, delimiter: str = '-',
               decode_digit: Callable[[str], Optional[int]] = decode_digit) -> Optional[str]:
    """Like :func:`decode` but returns ``None`` for invalid input."""
    try:
        return decode(text, delimiter, decode_digit)
    except PunycodeError:
        return None

###############################################################################
# RFC 3492 §7.1 sample strings
###############################################################################

RFC3492_VECTORS: List[Tuple[str, str, str]] = [
    ("Arabic (Egyptian)",
     "\u0644\u064A\u0647\u0645\u0627\u0628\u062A\u0643\u0644"
     "\u0645\u0648\u0634\u0639\u0631\u0628\u064A\u061F",
     "egbpdaj6bu4bxfgehfvwxn"),
    ("Chinese (simplified)",
     "\u4ED6\u4EEC\u4E3A\u4EC0\u4E48\u4E0D\u8BF4\u4E2D\u6587",
     "ihqwcrb4cv8a8dqg056pqjye"),
    ("Chinese (traditional)",
     "\u4ED6\u5011\u7232\u4EC0\u9EBD\u4E0D\u8AAA\u4E2D\u6587",
     "ihqwctvzc91f659drss3x8bo0yb"),
    ("Czech",
     "\u0050\u0072\u006F\u010D\u0070\u0072\u006F\u0073\u0074"
     "\u011B\u006E\u0065\u006D\u006C\u0075\u0076\u00ED\u010D"
     "\u0065\u0073\u006B\u0079",
     "Proprostnemluvesky-uyb24dma41a"),
    ("Hebrew",
     "\u05DC\u05DE\u05D4\u05D4\u05DD\u05E4\u05E9\u05D5\u05D8"
     "\u05DC\u05D0\u05DE\u05D3\u05D1\u05E8\u05D9\u05DD\u05E2"
     "\u05D1\u05E8\u05D9\u05EA",
     "4dbcagdahymbxekheh6e0a7fei0b"),
    ("Hindi (Devanagari)",
     "\u092F\u0939\u0932\u094B\u0917\u0939\u093F\u0928\u094D"
     "\u0926\u0940\u0915\u094D\u092F\u094B\u0902\u0928\u0939"
     "\u0940\u0902\u092C\u094B\u0932\u0938\u0915\u0924\u0947"
     "\u0939\u0948\u0902",
     "i1baa7eci9glrd9b2ae1bj0hfcgg6iyaf8o0a1dig0cd"),
    ("Japanese (kanji and hiragana)",
     "\u306A\u305C\u307F\u3093\u306A\u65E5\u672C\u8A9E\u3092"
     "\u8A71\u3057\u3066\u304F\u308C\u306A\u3044\u306E\u304B",
     "n8jok5ay5dzabd5bym9f0cm5685rrjetr6pdxa"),
    ("Korean (Hangul syllables)",
     "\uC138\uACC4\uC758\uBAA8\uB4E0\uC0AC\uB78C\uB4E4\uC774"
     "\uD55C\uAD6D\uC5B4\uB97C\uC774\uD574\uD55C\uB2E4\uBA74"
     "\uC5BC\uB9C8\uB098\uC88B\uC744\uAE4C",
     "989aomsvi5e83db1d2a355cv1e0vak1dwrv93d5xbh15a0dt30a5jpsd879ccm6fea98c"),
    # the RFC prints "...efbaDotcw..."; digits are written lower case here
    ("Russian (Cyrillic)",
     "\u043F\u043E\u0447\u0435\u043C\u0443\u0436\u0435\u043E"
     "\u043D\u0438\u043D\u0435\u0433\u043E\u0432\u043E\u0440"
     "\u044F\u0442\u043F\u043E\u0440\u0443\u0441\u0441\u043A"
     "\u0438",
     "b1abfaaepdrnnbgefbadotcwatmq2g4l"),
    ("Spanish",
     "\u0050\u006F\u0072\u0071\u0075\u00E9\u006E\u006F\u0070"
     "\u0075\u0065\u0064\u0065\u006E\u0073\u0069\u006D\u0070"
     "\u006C\u0065\u006D\u0065\u006E\u0074\u0065\u0068\u0061"
     "\u0062\u006C\u0061\u0072\u0065\u006E\u0045\u0073\u0070"
     "\u0061\u00F1\u006F\u006C",
     "PorqunopuedensimplementehablarenEspaol-fmd56a"),
    ("Vietnamese",
     "\u0054\u1EA1\u0069\u0073\u0061\u006F\u0068\u1ECD\u006B"
     "\u0068\u00F4\u006E\u0067\u0074\u0068\u1EC3\u0063\u0068"
     "\u1EC9\u006E\u00F3\u0069\u0074\u0069\u1EBF\u006E\u0067"
     "\u0056\u0069\u1EC7\u0074",
     "TisaohkhngthchnitingVit-kjcr8268qyxafd2f1b9g"),
    ("3<nen>B<gumi><kinpachi><sensei>",
     "\u0033\u5E74\u0042\u7D44\u91D1\u516B\u5148\u751F",
     "3B-ww4c5e180e575a65lsy2b"),
    ("<amuro><namie>-with-SUPER-MONKEYS",
     "\u5B89\u5BA4\u5948\u7F8E\u6075\u002D\u0077\u0069\u0074"
     "\u0068\u002D\u0053\u0055\u0050\u0045\u0052\u002D\u004D"
     "\u004F\u004E\u004B\u0045\u0059\u0053",
     "-with-SUPER-MONKEYS-pc58ag80a8qai00g7n9n"),
    ("Hello-Another-Way-<sorezore><no><basho>",
     "\u0048\u0065\u006C\u006C\u006F\u002D\u0041\u006E\u006F"
     "\u0074\u0068\u0065\u0072\u002D\u0057\u0061\u0079\u002D"
     "\u305D\u308C\u305E\u308C\u306E\u5834\u6240",
     "Hello-Another-Way--fc4qua05auwb3674vfr0b"),
    ("<hitotsu><yane><no><shita>2",
     "\u3072\u3068\u3064\u5C4B\u6839\u306E\u4E0B\u0032",
     "2-u9tlzr9756bt3uc0v"),
    ("Maji<de>Koi<suru>5<byou><mae>",
     "\u004D\u0061\u006A\u0069\u3067\u004B\u006F\u0069\u3059"
     "\u308B\u0035\u79D2\u524D",
     "MajiKoi5-783gue6qz075azm5e"),
    ("<pafii>de<runba>",
     "\u30D1\u30D5\u30A3\u30FC\u0064\u0065\u30EB\u30F3\u30D0",
     "de-jg4avhby1noc0d"),
    ("<sono><supiido><de>",
     "\u305D\u306E\u30B9\u30D4\u30FC\u30C9\u3067",
     "d9juau41awczczp"),
    ("-> $1.00 <-",
     "\u002D\u003E\u0020\u0024\u0031\u002E\u0030\u0030\u0020"
     "\u003C\u002D",
     "-> $1.00 <--"),
]

def self_test() -> Tuple[int, int]:
    """Run every RFC vector through both directions.

    Returns ``(passes, fails)`` counting each direction separately.
    """
    passes = fails = 0
    for name, unicode_text, puny in RFC3492_VECTORS:
        for label, got, want in (("encode", try_encode(unicode_text), puny),
                                 ("decode", try_decode(puny), unicode_text)):
            if got == want:
                passes += 1
            else:
                fails += 1
                print(f"FAIL {label} {name}: expected {want!r}, got {got!r}")
    return passes, fails

###############################################################################
# Demo / CLI
###############################################################################

def _parse_code_points(s: str) -> str:
    chars = []
    for tok in s.split():
        if tok[:2].lower() != 'u+':
            raise ValueError(f"Expected U+xxxx, got {tok!r}")
        chars.append(chr(int(tok[2:], 16)))
    return ''.join(chars)

def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(description="Bootstring/Punycode (RFC 3492) codec")
    parser.add_argument('input', nargs='?', help="String to encode or decode")
    parser.add_argument('-d', '--decode', action='store_true', help="Decode instead of encode")
    parser.add_argument('--delimiter', default='-', help="Delimiter between literal and digits (default '-')")
    parser.add_argument('-i', '--ignore-case', action='store_true', help="Accept upper case digits when decoding")
    parser.add_argument('-u', '--codepoints', action='store_true',
                        help="Read (encode) or print (decode) space separated U+xxxx values")
    parser.add_argument('--selftest', action='store_true', help="Check the RFC 3492 sample strings")
    args = parser.parse_args(argv)
    if args.selftest:
        passes, fails = self_test()
        print(f"Self-test: passed {passes}, failed {fails}")
        return 1 if fails else 0
    if args.input is None:
        parser.print_help()
        return 0
    try:
        if args.decode:
            digit_decoder = decode_digit_ignorecase if args.ignore_case else decode_digit
            out = decode(args.input, args.delimiter, digit_decoder)
            if args.codepoints:
                out = ' '.join(f"U+{ord(c):04X}" for c in out)
        else:
            text = _parse_code_points(args.input) if args.codepoints else args.input
            out = encode(text, args.delimiter)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(out)
    return 0

if __name__ == '__main__':
    sys.exit(main())
