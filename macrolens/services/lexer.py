"""Line-local VBA tokenizer.

Each recognizer looks at ``line`` starting at ``pos`` and either returns a
token or ``None``. ``tokenize_line`` tries them in order, so earlier
recognizers win (comments before identifiers, hex literals before the ``&``
operator, two-character operators before one-character ones).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Literal

from macrolens.services.vba_language import classify_word

TokenType = Literal[
    "keyword",
    "type",
    "builtin",
    "string",
    "comment",
    "number",
    "operator",
    "identifier",
    "whitespace",
    "punctuation",
]


@dataclass(frozen=True, slots=True)
class Token:
    type: TokenType
    text: str
    start: int
    end: int


_WHITESPACE_RE = re.compile(r"\s+")
_REM_RE = re.compile(r"rem(?=\s|$)", re.IGNORECASE)
_DECIMAL_RE = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?[%&!#@$]?")
_HEX_RE = re.compile(r"&[Hh][0-9A-Fa-f]+&?")
_OCTAL_RE = re.compile(r"&[Oo][0-7]+&?")
_IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*([$%&!#]?)")

_TWO_CHAR_OPERATORS = frozenset({"<=", ">=", "<>", ":="})
_ONE_CHAR_OPERATORS = frozenset("+-*/\\^&=<>")
_PUNCTUATION = frozenset("(),.:;_")

Recognizer = Callable[[str, int], "Token | None"]


def _match_whitespace(line: str, pos: int) -> Token | None:
    match = _WHITESPACE_RE.match(line, pos)
    if match is None:
        return None
    return Token("whitespace", match.group(0), pos, match.end())


def _match_comment(line: str, pos: int) -> Token | None:
    if line[pos] == "'":
        return Token("comment", line[pos:], pos, len(line))
    if pos > 0 and not (line[pos - 1].isspace() or line[pos - 1] == ":"):
        return None
    if _REM_RE.match(line, pos) is None:
        return None
    return Token("comment", line[pos:], pos, len(line))


def _match_string(line: str, pos: int) -> Token | None:
    if line[pos] != '"':
        return None
    end = pos + 1
    length = len(line)
    while end < length:
        if line[end] == '"':
            if end + 1 < length and line[end + 1] == '"':
                end += 2
                continue
            end += 1
            return Token("string", line[pos:end], pos, end)
        end += 1
    return Token("string", line[pos:], pos, length)


def _match_number(line: str, pos: int) -> Token | None:
    for pattern in (_HEX_RE, _OCTAL_RE, _DECIMAL_RE):
        match = pattern.match(line, pos)
        if match is not None:
            return Token("number", match.group(0), pos, match.end())
    return None


def _match_operator(line: str, pos: int) -> Token | None:
    pair = line[pos:pos + 2]
    if pair in _TWO_CHAR_OPERATORS:
        return Token("operator", pair, pos, pos + 2)
    char = line[pos]
    if char in _ONE_CHAR_OPERATORS:
        return Token("operator", char, pos, pos + 1)
    return None


def _match_punctuation(line: str, pos: int) -> Token | None:
    char = line[pos]
    if char in _PUNCTUATION:
        return Token("punctuation", char, pos, pos + 1)
    return None


def _match_identifier(line: str, pos: int) -> Token | None:
    match = _IDENTIFIER_RE.match(line, pos)
    if match is None:
        return None
    text = match.group(0)
    word = text[: len(text) - len(match.group(1))]
    return Token(classify_word(word), text, pos, match.end())


RECOGNIZERS: tuple[Recognizer, ...] = (
    _match_whitespace,
    _match_comment,
    _match_string,
    _match_number,
    _match_operator,
    _match_punctuation,
    _match_identifier,
)


def tokenize_line(line: str) -> tuple[Token, ...]:
    """Split one line of source into contiguous tokens covering the whole line."""
    text = str(line or "")
    tokens: list[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        token = None
        for recognizer in RECOGNIZERS:
            token = recognizer(text, pos)
            if token is not None:
                break
        if token is None:
            token = Token("punctuation", text[pos], pos, pos + 1)
        tokens.append(token)
        pos = token.end
    return tuple(tokens)
