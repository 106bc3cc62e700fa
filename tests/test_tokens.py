"""Tests for tokenizing and quoting helpers."""

import unittest

from nut_client.protocol.tokens import (
    quote, split_tokens, unquote, unquote_join, token_width,
)


class TestQuote(unittest.TestCase):

    def test_quote_wraps(self):
        self.assertEqual(quote("myups"), '"myups"')

    def test_quote_keeps_spaces(self):
        self.assertEqual(quote("my ups"), '"my ups"')

    def test_quote_empty(self):
        self.assertEqual(quote(""), '""')


class TestSplitTokens(unittest.TestCase):

    def test_simple_line(self):
        self.assertEqual(split_tokens('VAR myups ups.load "24"'),
                         ["VAR", "myups", "ups.load", '"24"'])

    def test_consecutive_spaces_keep_empty_tokens(self):
        """Positions matter, so empty tokens are not collapsed."""
        self.assertEqual(split_tokens("a  b"), ["a", "", "b"])

    def test_quoted_value_with_spaces_is_split(self):
        self.assertEqual(split_tokens('VAR u x "100 percent"'),
                         ["VAR", "u", "x", '"100', 'percent"'])


class TestUnquote(unittest.TestCase):

    def test_strips_one_pair(self):
        self.assertEqual(unquote('"OL"'), "OL")

    def test_only_one_pair(self):
        self.assertEqual(unquote('""x""'), '"x"')

    def test_unbalanced_left_alone(self):
        self.assertEqual(unquote('"OL'), '"OL')
        self.assertEqual(unquote('OL"'), 'OL"')

    def test_lone_quote_left_alone(self):
        self.assertEqual(unquote('"'), '"')

    def test_empty_quoted(self):
        self.assertEqual(unquote('""'), "")


class TestUnquoteJoin(unittest.TestCase):

    def test_rejoins_spaced_value(self):
        tokens = split_tokens('VAR ups1 battery.charge "100 percent"')
        self.assertEqual(unquote_join(tokens, 3), "100 percent")

    def test_preserves_inner_double_space(self):
        tokens = split_tokens('VAR u x "a  b"')
        self.assertEqual(unquote_join(tokens, 3), "a  b")

    def test_index_past_end(self):
        self.assertEqual(unquote_join(["VAR", "u"], 5), "")

    def test_unquoted_value(self):
        self.assertEqual(unquote_join(["VAR", "u", "x", "42"], 3), "42")


class TestTokenWidth(unittest.TestCase):

    def test_single_word(self):
        self.assertEqual(token_width("myups"), 1)

    def test_embedded_spaces(self):
        self.assertEqual(token_width("my big ups"), 3)

    def test_double_space(self):
        self.assertEqual(token_width("my  ups"), 3)


if __name__ == "__main__":
    unittest.main()
