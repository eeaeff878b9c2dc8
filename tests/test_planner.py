import os
import tempfile
import unittest
from dataclasses import replace

from matrix_resizer.config import DEFAULT_CONFIG
from matrix_resizer.planner import create_output_directories, derive_folder_name, plan_outputs


class TestDeriveFolderName(unittest.TestCase):
    def test_spaces_and_symbols(self):
        self.assertEqual(derive_folder_name("My Photo #1.png"), "my-photo-1")

    def test_long_name_is_truncated_to_fifteen(self):
        name = derive_folder_name("AAAAAAAAAAAAAAAAAAAA.jpg")
        self.assertEqual(name, "aaaaaaaaaaaa...")
        self.assertEqual(len(name), 15)

    def test_exactly_fifteen_is_kept(self):
        self.assertEqual(derive_folder_name("abcdefghijklmno.png"), "abcdefghijklmno")

    def test_whitespace_runs_collapse(self):
        self.assertEqual(derive_folder_name("a \t  b.jpeg"), "a-b")

    def test_only_last_extension_is_stripped(self):
        self.assertEqual(derive_folder_name("archive.tar.png"), "archivetar")

    def test_uses_basename(self):
        self.assertEqual(derive_folder_name(os.path.join("input", "Beach.JPG")), "beach")

    def test_nothing_left_gives_empty_name(self):
        self.assertEqual(derive_folder_name("###.png"), "")
        self.assertEqual(derive_folder_name("\u5199\u771f.jpg"), "")


class TestPlanOutputs(unittest.TestCase):
    def test_cross_product_order(self):
        plan = plan_outputs("beach.jpg", "abc12345", "2024-03-10", DEFAULT_CONFIG)
        self.assertEqual(plan.folder_name, "beach")
        self.assertEqual(len(plan.entries), 10)
        pairs = [(e.format, e.size) for e in plan.entries]
        self.assertEqual(
            pairs,
            [(f, s) for f in ("png", "webp") for s in (60, 120, 300, 600, 1200)],
        )
        self.assertEqual(plan.formats, ("png", "webp"))

    def test_file_names_and_paths(self):
        plan = plan_outputs("beach.jpg", "abc12345", "2024-03-10", DEFAULT_CONFIG)
        first = plan.entries[0]
        self.assertEqual(first.file_name, "abc12345_60_2024-03-10.png")
        self.assertEqual(first.relative_path, os.path.join("beach", "png", "abc12345_60_2024-03-10.png"))
        last = plan.entries[-1]
        self.assertEqual(last.file_name, "abc12345_1200_2024-03-10.webp")

    def test_paths_are_unique(self):
        plan = plan_outputs("beach.jpg", "abc12345", "2024-03-10", DEFAULT_CONFIG)
        paths = [e.relative_path for e in plan.entries]
        self.assertEqual(len(paths), len(set(paths)))

    def test_idempotent(self):
        a = plan_outputs("My Photo.png", "zzz", "2022-01-15", DEFAULT_CONFIG)
        b = plan_outputs("My Photo.png", "zzz", "2022-01-15", DEFAULT_CONFIG)
        self.assertEqual(a, b)

    def test_empty_folder_name_puts_formats_at_run_root(self):
        plan = plan_outputs("###.png", "id", "2020-01-01", DEFAULT_CONFIG)
        self.assertEqual(plan.folder_name, "")
        self.assertEqual(plan.entries[0].relative_path, os.path.join("png", "id_60_2020-01-01.png"))

    def test_follows_configured_order(self):
        config = replace(DEFAULT_CONFIG, target_formats=("webp", "png"), output_sizes=(300, 60))
        plan = plan_outputs("x.png", "id", "2020-01-01", config)
        self.assertEqual(
            [(e.format, e.size) for e in plan.entries],
            [("webp", 300), ("webp", 60), ("png", 300), ("png", 60)],
        )


class TestCreateOutputDirectories(unittest.TestCase):
    def test_creates_folder_and_format_subfolders(self):
        plan = plan_outputs("beach.jpg", "id", "2024-03-10", DEFAULT_CONFIG)
        with tempfile.TemporaryDirectory() as tmp:
            image_dir = create_output_directories(tmp, plan)
            self.assertEqual(image_dir, os.path.join(tmp, "beach"))
            self.assertTrue(os.path.isdir(os.path.join(tmp, "beach", "png")))
            self.assertTrue(os.path.isdir(os.path.join(tmp, "beach", "webp")))

            # Safe to call again
            create_output_directories(tmp, plan)
            self.assertEqual(sorted(os.listdir(image_dir)), ["png", "webp"])


if __name__ == "__main__":
    unittest.main()
