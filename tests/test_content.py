"""Tests for commit content generation and the activity recorder."""

import random
import shutil
import tempfile
import unittest
from pathlib import Path

from cyclops import (
    COMMIT_MESSAGES,
    ActivityRecorder,
    CommitRequest,
    ContentGenerator,
    Date,
    FileIOFailedError,
)


class TestContentGenerator(unittest.TestCase):
    """Test random draws stay within their ranges."""

    def setUp(self):
        self.generator = ContentGenerator(random.Random(42))

    def test_commit_count_range(self):
        """Verify counts cover 0..max inclusive."""
        counts = {self.generator.pick_commit_count(3) for _ in range(500)}
        self.assertEqual(counts, {0, 1, 2, 3})

    def test_message_from_catalog(self):
        self.assertEqual(len(COMMIT_MESSAGES), 24)
        for _ in range(100):
            self.assertIn(self.generator.pick_message(), COMMIT_MESSAGES)

    def test_session_minutes_range(self):
        for _ in range(500):
            self.assertTrue(30 <= self.generator.pick_session_minutes() <= 210)

    def test_changed_lines_range(self):
        for _ in range(500):
            self.assertTrue(10 <= self.generator.pick_changed_lines() <= 110)

    def test_time_of_day_range(self):
        """Verify hours fall in working hours and minutes are valid."""
        hours = set()
        for _ in range(1000):
            hour, minute = self.generator.pick_time_of_day()
            self.assertTrue(8 <= hour <= 21)
            self.assertTrue(0 <= minute <= 59)
            hours.add(hour)
        self.assertEqual(hours, set(range(8, 22)))

    def test_seeded_generators_agree(self):
        """Verify an injected seed makes draws reproducible."""
        first = ContentGenerator(random.Random(7))
        second = ContentGenerator(random.Random(7))
        date = Date(2024, 5, 1)

        for sequence in range(1, 20):
            self.assertEqual(
                first.build_request(date, sequence),
                second.build_request(date, sequence),
            )

    def test_build_request(self):
        """Verify a request carries its date and sequence."""
        request = self.generator.build_request(Date(2024, 5, 1), 3)

        self.assertEqual(request.date, Date(2024, 5, 1))
        self.assertEqual(request.sequence, 3)
        self.assertIn(request.message, COMMIT_MESSAGES)


class TestCommitRequest(unittest.TestCase):
    """Test forged timestamp rendering."""

    def test_timestamp(self):
        request = CommitRequest(
            date=Date(2024, 1, 5),
            sequence=1,
            message="Fix race condition bug",
            session_minutes=60,
            changed_lines=20,
            hour=8,
            minute=7,
        )
        self.assertEqual(request.timestamp, "2024-01-05 08:07:00")


class TestActivityRecorder(unittest.TestCase):
    """Test appending activity records."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = Path(self.temp_dir) / "cyclops_activity.txt"
        self.recorder = ActivityRecorder(self.path)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_record_format(self):
        """Verify the exact block written for one record."""
        self.recorder.record(Date(2024, 1, 5), 2, 95, 42)

        self.assertEqual(
            self.path.read_text(encoding="utf-8"),
            "// Activity log: 2024-01-05 #2\n"
            "// Session: 95 minutes of development work\n"
            "// Changes: 42 lines modified\n"
            "/* Generated activity to demonstrate the meaninglessness of GitHub metrics */\n"
            "\n",
        )

    def test_records_append_in_order(self):
        """Verify records accumulate instead of overwriting."""
        self.path.write_text("existing\n", encoding="utf-8")

        self.recorder.record(Date(2024, 1, 1), 1, 30, 10)
        self.recorder.record(Date(2024, 1, 2), 1, 31, 11)

        content = self.path.read_text(encoding="utf-8")
        self.assertTrue(content.startswith("existing\n"))
        self.assertLess(content.index("2024-01-01 #1"), content.index("2024-01-02 #1"))

    def test_unwritable_path(self):
        """Verify an unopenable file raises FileIOFailedError."""
        recorder = ActivityRecorder(Path(self.temp_dir) / "missing" / "activity.txt")

        with self.assertRaises(FileIOFailedError):
            recorder.record(Date(2024, 1, 1), 1, 30, 10)


if __name__ == "__main__":
    unittest.main()
