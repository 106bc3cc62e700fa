"""Tests for the command registry, builders and response classification."""

import unittest

from nut_client.protocol.commands import (
    COMMANDS, ResponseKind, build_command, classify, expected_begin,
    begin_variants, row_prefixes, parse_error, describe_error,
)


class TestBuildCommand(unittest.TestCase):

    def test_bare_verb(self):
        self.assertEqual(build_command("LIST UPS"), "LIST UPS")

    def test_one_argument(self):
        self.assertEqual(build_command("LIST VAR", "myups"), 'LIST VAR "myups"')

    def test_two_arguments(self):
        self.assertEqual(build_command("GET VAR", "my ups", "battery.charge"),
                         'GET VAR "my ups" "battery.charge"')

    def test_login_commands(self):
        self.assertEqual(build_command("USERNAME", "admin"), 'USERNAME "admin"')
        self.assertEqual(build_command("PASSWORD", "p w"), 'PASSWORD "p w"')

    def test_unknown_verb(self):
        with self.assertRaises(ValueError):
            build_command("SET VAR", "myups", "x", "1")

    def test_wrong_argument_count(self):
        with self.assertRaises(ValueError):
            build_command("GET VAR", "myups")

    def test_line_break_in_argument(self):
        with self.assertRaises(ValueError):
            build_command("USERNAME", "admin\nLIST UPS")

    def test_registry_covers_modelled_commands(self):
        self.assertEqual(set(COMMANDS),
                         {"USERNAME", "PASSWORD", "LIST UPS", "LIST VAR", "GET VAR"})
        self.assertTrue(COMMANDS["LIST VAR"].list_reply)
        self.assertFalse(COMMANDS["GET VAR"].list_reply)


class TestClassify(unittest.TestCase):

    def test_known_markers(self):
        self.assertIs(classify("OK"), ResponseKind.OK)
        self.assertIs(classify("OK LOGGED"), ResponseKind.OK)
        self.assertIs(classify("BEGIN LIST UPS"), ResponseKind.BEGIN)
        self.assertIs(classify("END LIST VAR myups"), ResponseKind.END)
        self.assertIs(classify('VAR myups ups.load "24"'), ResponseKind.VAR)
        self.assertIs(classify('UPS myups "Office"'), ResponseKind.UPS)
        self.assertIs(classify("ERR UNKNOWN-UPS"), ResponseKind.ERR)

    def test_anything_else_is_other(self):
        self.assertIs(classify("RW myups x"), ResponseKind.OTHER)
        self.assertIs(classify(""), ResponseKind.OTHER)
        self.assertIs(classify("var lowercase"), ResponseKind.OTHER)

    def test_marker_must_be_whole_token(self):
        self.assertIs(classify("VARIABLE x"), ResponseKind.OTHER)


class TestListFraming(unittest.TestCase):

    def test_expected_begin_quotes_identifier(self):
        self.assertEqual(expected_begin("LIST VAR", "my ups"),
                         'BEGIN LIST VAR "my ups"')

    def test_begin_variants(self):
        self.assertEqual(begin_variants("LIST VAR", "myups"),
                         ('BEGIN LIST VAR "myups"', "BEGIN LIST VAR myups"))

    def test_expected_begin_only_for_list_commands(self):
        with self.assertRaises(ValueError):
            expected_begin("GET VAR", "myups", "ups.load")
        with self.assertRaises(ValueError):
            begin_variants("USERNAME", "admin")

    def test_begin_variants_without_arguments(self):
        self.assertEqual(begin_variants("LIST UPS"), ("BEGIN LIST UPS",))

    def test_row_prefixes(self):
        self.assertEqual(row_prefixes("VAR", "my ups"),
                         ('VAR "my ups" ', "VAR my ups "))


class TestErrors(unittest.TestCase):

    def test_parse_error_code(self):
        self.assertEqual(parse_error("ERR UNKNOWN-UPS"), ("UNKNOWN-UPS", ""))

    def test_parse_error_with_detail(self):
        self.assertEqual(parse_error("ERR DATA-STALE since boot"),
                         ("DATA-STALE", "since boot"))

    def test_describe_known_error(self):
        self.assertEqual(describe_error("ERR ACCESS-DENIED"),
                         "Access denied: bad credentials or host not allowed")

    def test_describe_unknown_error(self):
        self.assertIn("BOGUS", describe_error("ERR BOGUS"))


if __name__ == "__main__":
    unittest.main()
