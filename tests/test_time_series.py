import math
import unittest
from datetime import datetime

from mareelog.data_loading import parse_line
from mareelog.time_series import (
    normalize_time_with_seconds,
    parse_timestamp,
    rows_to_frame,
    sort_rows,
    timestamp_ms,
)

from log_samples import make_line


def row_at(date, time, temp=1.0):
    return parse_line(make_line(0, date, time, [temp]), {})


class ParseTimestampTests(unittest.TestCase):
    def test_minutes_only(self):
        self.assertEqual(parse_timestamp("12/06/2024", "08:05"), datetime(2024, 6, 12, 8, 5))

    def test_with_seconds(self):
        self.assertEqual(parse_timestamp("12/06/2024", "08:05:42"), datetime(2024, 6, 12, 8, 5, 42))

    def test_two_digit_year(self):
        self.assertEqual(parse_timestamp("1/2/24", "00:00"), datetime(2024, 2, 1))

    def test_malformed(self):
        cases = [
            ("", "08:00"),
            ("12/06/2024", ""),
            ("12-06-2024", "08:00"),
            ("32/01/2024", "08:00"),
            ("12/13/2024", "08:00"),
            ("12/06/2024", "8h00"),
            ("12/06/2024", "25:00"),
            ("aa/06/2024", "08:00"),
        ]
        for date, time in cases:
            self.assertIsNone(parse_timestamp(date, time), (date, time))

    def test_timestamp_ms(self):
        self.assertEqual(timestamp_ms(row_at("01/01/1970", "00:01")), 60000.0)
        self.assertTrue(math.isnan(timestamp_ms(row_at("bad", "00:01"))))


class SortRowsTests(unittest.TestCase):
    def test_ascending_order(self):
        rows = [row_at("13/06/2024", "00:00"), row_at("12/06/2024", "23:59"), row_at("12/06/2024", "08:00")]
        ordered = sort_rows(rows)
        self.assertEqual([r.time_of_day for r in ordered], ["08:00", "23:59", "00:00"])

    def test_stable_for_equal_timestamps(self):
        rows = [row_at("12/06/2024", "08:00", 1.0), row_at("12/06/2024", "08:00", 2.0)]
        self.assertEqual([r.temp(1) for r in sort_rows(rows)], [1.0, 2.0])

    def test_invalid_row_in_sorted_input_stays_in_place(self):
        rows = [row_at("12/06/2024", "08:00"), row_at("??", ""), row_at("12/06/2024", "08:01")]
        with self.assertLogs("mareelog.time_series", level="WARNING"):
            ordered = sort_rows(rows)
        self.assertEqual([r.date for r in ordered], ["12/06/2024", "??", "12/06/2024"])

    def test_input_not_mutated(self):
        rows = [row_at("12/06/2024", "08:01"), row_at("12/06/2024", "08:00")]
        sort_rows(rows)
        self.assertEqual(rows[0].time_of_day, "08:01")


class FrameTests(unittest.TestCase):
    def test_normalize_time_with_seconds(self):
        self.assertEqual(normalize_time_with_seconds("08:05"), "08:05:00")
        self.assertEqual(normalize_time_with_seconds("08:05:07"), "08:05:07")
        self.assertEqual(normalize_time_with_seconds("08:05:07:99"), "08:05:07")
        self.assertEqual(normalize_time_with_seconds("0805"), "0805")

    def test_rows_to_frame(self):
        df = rows_to_frame([row_at("12/06/2024", "08:00", 4.5), row_at("bad", "x")])
        self.assertEqual(len(df), 2)
        self.assertIn("Temp12", df.columns)
        self.assertIn("A12", df.columns)
        self.assertEqual(df["Temp1"].iloc[0], 4.5)
        self.assertEqual(df["timestamp"].iloc[0], datetime(2024, 6, 12, 8, 0))
        self.assertTrue(df["timestamp"].isna().iloc[1])

    def test_empty_frame(self):
        df = rows_to_frame([])
        self.assertTrue(df.empty)
        self.assertIn("timestamp", df.columns)


if __name__ == "__main__":
    unittest.main()
