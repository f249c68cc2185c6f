"""
Tests for Typed Values

These tests verify type inference from protocol tokens:
- from_token(): decimal literals become Numeric, everything else Text
- render(): wire rendering of each variant

Run with: python -m pytest tests/test_values.py -v
"""

import math

import pytest
from typedkv.cache.values import Numeric, Text, from_token, render


class TestFromTokenNumeric:
    """Tokens that read as finite decimal numbers."""

    @pytest.mark.parametrize("token,expected", [
        ("1", 1.0),
        ("0", 0.0),
        ("-3", -3.0),
        ("+7", 7.0),
        ("2.5", 2.5),
        ("1.", 1.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("1E-2", 0.01),
        ("-4.25e+1", -42.5),
        ("007", 7.0),
    ])
    def test_decimal_literals(self, token, expected):
        """Test decimal literals are stored as numbers."""
        assert from_token(token) == Numeric(expected)

    def test_underflow_is_numeric_zero(self):
        """Test values too small for a float underflow to zero."""
        value = from_token("1e-400")
        assert value == Numeric(0.0)

    def test_negative_underflow_keeps_sign(self):
        """Test negative underflow yields -0.0."""
        value = from_token("-1e-400")
        assert isinstance(value, Numeric)
        assert math.copysign(1.0, value.value) == -1.0


class TestFromTokenText:
    """Tokens that fall back to text."""

    @pytest.mark.parametrize("token", [
        "bar",
        "",
        "1e999",
        "-1e999",
        "inf",
        "-Infinity",
        "nan",
        "NaN",
        "1_000",
        "1.2.3",
        "e5",
        ".",
        "+",
        "0x10",
        "12abc",
        "١",  # ARABIC-INDIC DIGIT ONE
    ])
    def test_non_numeric_tokens(self, token):
        """Test tokens that are not finite decimal numbers stay text."""
        assert from_token(token) == Text(token)

    def test_text_preserves_case(self):
        """Test text values are stored exactly as sent."""
        assert from_token("MixedCase") == Text("MixedCase")


class TestEquality:
    """Test equality between typed values."""

    def test_numeric_never_equals_text(self):
        """Test variants never compare equal."""
        assert Numeric(1.0) != Text("1.0")
        assert Text("1") != Numeric(1.0)

    def test_nan_is_not_equal_to_itself(self):
        """Test Numeric follows IEEE equality."""
        nan = Numeric(float("nan"))
        assert nan != nan
        assert nan != Numeric(float("nan"))

    def test_values_are_immutable(self):
        """Test typed values cannot be modified."""
        value = Text("bar")
        with pytest.raises(AttributeError):
            value.value = "baz"


class TestRender:
    """Test wire rendering."""

    def test_render_numeric(self):
        assert render(Numeric(1.0)) == "Numeric(1.0)"
        assert render(Numeric(-2.5)) == "Numeric(-2.5)"

    def test_render_text(self):
        assert render(Text("bar")) == 'Text("bar")'

    def test_render_text_escapes_quotes(self):
        """Test quotes and backslashes inside text are escaped."""
        assert render(Text('a"b\\c')) == 'Text("a\\"b\\\\c")'
