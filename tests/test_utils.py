import os
import re
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from matrix_resizer.config import DEFAULT_CONFIG
from matrix_resizer.errors import StartupError
from matrix_resizer.utils import (
    create_timestamped_folder_name,
    ensure_directory_exists,
    format_date,
    generate_random_id,
    get_image_files,
    is_supported_format,
)


class TestHelpers(unittest.TestCase):
    def test_random_id(self):
        self.assertRegex(generate_random_id(), r"^[a-z0-9]{8}$")
        self.assertEqual(len(generate_random_id(12)), 12)

    def test_format_date_normalizes_to_utc(self):
        tokyo = timezone(timedelta(hours=9))
        self.assertEqual(format_date(datetime(2023, 6, 1, 3, 0, tzinfo=tokyo)), "2023-05-31")
        self.assertEqual(format_date(datetime(2023, 6, 1, 23, 0)), "2023-06-01")

    def test_timestamped_folder_name(self):
        self.assertEqual(create_timestamped_folder_name(datetime(2024, 3, 10, 14, 5, 9)), "2024-03-10_14-05-09")
        self.assertTrue(re.fullmatch(r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}", create_timestamped_folder_name()))

    def test_is_supported_format(self):
        self.assertTrue(is_supported_format("photo.JPG", DEFAULT_CONFIG))
        self.assertTrue(is_supported_format("photo.heic", DEFAULT_CONFIG))
        self.assertFalse(is_supported_format("notes.txt", DEFAULT_CONFIG))
        self.assertFalse(is_supported_format("README", DEFAULT_CONFIG))

    def test_ensure_directory_exists(self):
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "a", "b")
            self.assertEqual(ensure_directory_exists(target), target)
            self.assertTrue(os.path.isdir(target))
            ensure_directory_exists(target)


class TestGetImageFiles(unittest.TestCase):
    def test_filters_by_extension_and_skips_directories(self):
        with tempfile.TemporaryDirectory() as tmp:
            for name in ("b.png", "a.JPEG", "notes.txt", "scan.svg", "noext"):
                open(os.path.join(tmp, name), "wb").close()
            os.makedirs(os.path.join(tmp, "nested.png"))

            files = get_image_files(tmp, DEFAULT_CONFIG)

            self.assertEqual([os.path.basename(f) for f in files], ["a.JPEG", "b.png", "scan.svg"])
            self.assertTrue(all(os.path.dirname(f) == tmp for f in files))

    def test_missing_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(StartupError):
                get_image_files(os.path.join(tmp, "missing"), DEFAULT_CONFIG)


if __name__ == "__main__":
    unittest.main()
