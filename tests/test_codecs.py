"""Tests for the stored-value encodings."""

from __future__ import annotations

import datetime
import unittest

from muluparty.core.codecs import (
    Completion,
    decode_id_set,
    decode_ledger,
    decode_points,
    encode_id_set,
    encode_ledger,
    encode_points,
    parse_date,
    validate_identifier,
    without_user,
)
from muluparty.errors import MalformedDocumentError, ValidationError

WHEN = datetime.datetime(2026, 3, 14, 9, 26, 53)


class TestPointsEncoding(unittest.TestCase):
    def test_empty_map_encodes_to_sentinel(self) -> None:
        self.assertEqual(encode_points({}), ["! – 0"])

    def test_sentinel_decodes_to_empty_map(self) -> None:
        self.assertEqual(decode_points(["! – 0"]), {})

    def test_entries_are_sorted(self) -> None:
        self.assertEqual(
            encode_points({"u2": 0, "u1": 7}), ["u1 – 7", "u2 – 0"]
        )

    def test_round_trip(self) -> None:
        points = {"u1": 3, "u2": 0, "u3": -2}
        self.assertEqual(decode_points(encode_points(points)), points)

    def test_em_dash_is_accepted(self) -> None:
        self.assertEqual(decode_points(["u1 — 4"]), {"u1": 4})

    def test_missing_delimiter_rejects_whole_map(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_points(["u1 – 1", "u2 2"])

    def test_non_integer_value_rejected(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_points(["u1 – lots"])

    def test_too_many_components_rejected(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_points(["u1 – 1 – 2"])

    def test_empty_list_rejected(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_points([])

    def test_duplicate_user_rejected(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_points(["u1 – 1", "u1 – 2"])


class TestLedgerEncoding(unittest.TestCase):
    def test_empty_ledger_encodes_to_sentinel(self) -> None:
        self.assertEqual(encode_ledger({}), {"!": ["!"]})
        self.assertEqual(decode_ledger({"!": ["!"]}), {})

    def test_round_trip(self) -> None:
        ledger = {"c1": [Completion("u1", WHEN), Completion("u2", WHEN)]}
        encoded = encode_ledger(ledger)
        self.assertEqual(encoded, {"c1": ["u1 – 2026-03-14 09:26:53", "u2 – 2026-03-14 09:26:53"]})
        self.assertEqual(decode_ledger(encoded), ledger)

    def test_empty_completion_list_is_dropped(self) -> None:
        self.assertEqual(encode_ledger({"c1": []}), {"!": ["!"]})

    def test_bad_date_rejected(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_ledger({"c1": ["u1 – yesterday"]})

    def test_non_list_entries_rejected(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_ledger({"c1": "u1 – 2026-03-14 09:26:53"})

    def test_without_user_drops_emptied_challenges(self) -> None:
        ledger = {
            "c1": [Completion("u1", WHEN)],
            "c2": [Completion("u1", WHEN), Completion("u2", WHEN)],
        }
        self.assertEqual(without_user(ledger, "u1"), {"c2": [Completion("u2", WHEN)]})


class TestIdSets(unittest.TestCase):
    def test_empty_set_encodes_to_sentinel(self) -> None:
        self.assertEqual(encode_id_set([]), ["!"])

    def test_sentinel_entries_ignored(self) -> None:
        self.assertEqual(decode_id_set(["!", "t1", "!", "t2", "t1"]), ["t1", "t2"])

    def test_non_string_rejected(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            decode_id_set(["t1", 2])


class TestDates(unittest.TestCase):
    def test_parse_date(self) -> None:
        self.assertEqual(parse_date("2026-03-14 09:26:53"), WHEN)

    def test_parse_date_rejects_non_strings(self) -> None:
        with self.assertRaises(MalformedDocumentError):
            parse_date(None)


class TestIdentifiers(unittest.TestCase):
    def test_plain_ids_pass(self) -> None:
        self.assertEqual(validate_identifier("auth-123"), "auth-123")

    def test_ids_that_break_encodings_rejected(self) -> None:
        for value in ["a – b", "a — b", "!", "a/b", "", " u1", "u1 ", None]:
            with self.subTest(value=value), self.assertRaises(ValidationError):
                validate_identifier(value)

    def test_message_names_the_kind(self) -> None:
        with self.assertRaises(ValidationError) as raised:
            validate_identifier("a – b", "User identifier")
        self.assertEqual(
            raised.exception.message,
            "Invalid User identifier 'a – b': it cannot contain '–'.",
        )


if __name__ == "__main__":
    unittest.main()
