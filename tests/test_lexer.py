from __future__ import annotations

import pytest

from macrolens.services.lexer import Token, tokenize_line
from macrolens.services.token_cache import LineTokenCache


def _types(line: str) -> list[tuple[str, str]]:
    return [(t.type, t.text) for t in tokenize_line(line) if t.type != "whitespace"]


def _assert_partition(line: str) -> None:
    tokens = tokenize_line(line)
    assert "".join(t.text for t in tokens) == line
    for left, right in zip(tokens, tokens[1:]):
        assert left.end == right.start
    if tokens:
        assert tokens[0].start == 0
        assert tokens[-1].end == len(line)


# ============================================================================
# Classification
# ============================================================================

class TestClassification:
    def test_declaration_line(self):
        assert _types("Dim x As Integer") == [
            ("keyword", "Dim"),
            ("identifier", "x"),
            ("keyword", "As"),
            ("type", "Integer"),
        ]

    def test_builtin_call(self):
        assert _types('MsgBox "Hi"') == [("builtin", "MsgBox"), ("string", '"Hi"')]

    def test_keywords_are_case_insensitive(self):
        assert _types("dim X as long") == [
            ("keyword", "dim"),
            ("identifier", "X"),
            ("keyword", "as"),
            ("type", "long"),
        ]

    def test_type_suffix_is_stripped_before_classification(self):
        tokens = _types("Left$(s, 2)")
        assert tokens[0] == ("builtin", "Left$")

    def test_identifier_with_underscore(self):
        assert _types("my_var1") == [("identifier", "my_var1")]


# ============================================================================
# Comments and strings
# ============================================================================

class TestCommentsAndStrings:
    def test_apostrophe_comment_runs_to_end(self):
        tokens = tokenize_line("x = 1 ' set x")
        assert tokens[-1] == Token("comment", "' set x", 6, 13)

    def test_rem_at_line_start(self):
        assert _types("Rem this is a comment") == [("comment", "Rem this is a comment")]

    def test_rem_after_colon(self):
        assert _types("x = 1:Rem note")[-1] == ("comment", "Rem note")

    def test_rem_alone_on_line(self):
        assert _types("rem") == [("comment", "rem")]

    def test_identifier_starting_with_rem_is_not_comment(self):
        assert _types("Remark = 1")[0] == ("identifier", "Remark")

    def test_doubled_quote_escape(self):
        tokens = _types('s = "He said ""hi"""')
        assert tokens[-1] == ("string", '"He said ""hi"""')

    def test_unterminated_string_runs_to_end(self):
        tokens = tokenize_line('s = "open')
        assert tokens[-1].type == "string"
        assert tokens[-1].text == '"open'
        assert tokens[-1].end == len('s = "open')

    def test_apostrophe_inside_string_is_not_comment(self):
        assert _types("s = \"it's\"")[-1] == ("string", "\"it's\"")


# ============================================================================
# Numbers and operators
# ============================================================================

class TestNumbersAndOperators:
    @pytest.mark.parametrize("literal", ["42", "3.14", ".5", "1e10", "1.5E-3", "&HFF", "&O17", "&HFF&", "10#", "2@"])
    def test_numeric_literals(self, literal):
        assert _types(literal) == [("number", literal)]

    def test_exponent_requires_digits(self):
        assert _types("x = 1e") == [
            ("identifier", "x"),
            ("operator", "="),
            ("number", "1"),
            ("identifier", "e"),
        ]
        assert _types("1e+")[:2] == [("number", "1"), ("identifier", "e")]

    def test_number_has_at_most_one_decimal_point(self):
        assert _types("1..2") == [("number", "1."), ("number", ".2")]
        assert _types("1.2.3") == [("number", "1.2"), ("number", ".3")]

    def test_hex_before_ampersand_operator(self):
        assert _types("a & &H1F") == [
            ("identifier", "a"),
            ("operator", "&"),
            ("number", "&H1F"),
        ]

    @pytest.mark.parametrize("op", ["<=", ">=", "<>", ":="])
    def test_two_char_operators(self, op):
        assert _types(f"a {op} b")[1] == ("operator", op)

    def test_one_char_operators(self):
        ops = [text for kind, text in _types("a + b - c * d / e \\ f ^ g = h") if kind == "operator"]
        assert ops == ["+", "-", "*", "/", "\\", "^", "="]

    def test_punctuation(self):
        kinds = _types("Foo(a, b).Bar")
        assert ("punctuation", "(") in kinds
        assert ("punctuation", ",") in kinds
        assert ("punctuation", ")") in kinds
        assert ("punctuation", ".") in kinds

    def test_unknown_character_becomes_punctuation(self):
        assert _types("x ? y")[1] == ("punctuation", "?")


# ============================================================================
# Structural properties
# ============================================================================

class TestTokenSpans:
    @pytest.mark.parametrize(
        "line",
        [
            "",
            "   ",
            "Dim x As Integer",
            'MsgBox "Hello, World", vbOKOnly + vbInformation, "Title"',
            "    For i = 1 To 10 Step 2 ' loop",
            'x = "unterminated',
            "a$ = b% + c& * d! / e# ~ €",
        ],
    )
    def test_tokens_partition_the_line(self, line):
        _assert_partition(line)

    def test_empty_line_has_no_tokens(self):
        assert tokenize_line("") == ()

    def test_tokenizing_twice_is_stable(self):
        line = "If x <> 0 Then y = x Mod 3"
        assert tokenize_line(line) == tokenize_line(line)


# ============================================================================
# LineTokenCache
# ============================================================================

class TestLineTokenCache:
    def test_returns_cached_tuple(self):
        cache = LineTokenCache(4)
        first = cache.tokens_for("Dim a")
        assert cache.tokens_for("Dim a") is first
        assert len(cache) == 1

    def test_evicts_least_recently_used(self):
        cache = LineTokenCache(2)
        cache.tokens_for("a")
        cache.tokens_for("b")
        cache.tokens_for("a")
        cache.tokens_for("c")
        assert "a" in cache
        assert "c" in cache
        assert "b" not in cache

    def test_zero_capacity_disables_caching(self):
        cache = LineTokenCache(0)
        tokens = cache.tokens_for("Dim a")
        assert tokens == tokenize_line("Dim a")
        assert len(cache) == 0

    def test_negative_capacity_raises(self):
        with pytest.raises(ValueError):
            LineTokenCache(-1)

    def test_clear(self):
        cache = LineTokenCache(4)
        cache.tokens_for("x")
        cache.clear()
        assert len(cache) == 0
        assert cache.get("x") is None
