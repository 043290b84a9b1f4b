import shutil
import tempfile
import unittest
from pathlib import Path

from dotjsx.compiler.build import build_templates
from dotjsx.config import CompilerConfig


class TestBuildTemplates(unittest.TestCase):
    def setUp(self) -> None:
        self.test_dir = tempfile.mkdtemp()
        self.tmp_path = Path(self.test_dir).resolve()
        self.src = self.tmp_path / "templates"
        (self.src / "nested").mkdir(parents=True)
        (self.src / "a.dot").write_text("<a>{{! it.a }}</a>", encoding="utf-8")
        (self.src / "nested" / "b.dot").write_text("<b></b>", encoding="utf-8")
        (self.src / "notes.txt").write_text("not a template", encoding="utf-8")

    def tearDown(self) -> None:
        shutil.rmtree(self.test_dir)

    def test_builds_next_to_templates_by_default(self) -> None:
        summary = build_templates(self.src)
        self.assertTrue(summary.ok)
        self.assertEqual(summary.out_dir, self.src)
        self.assertEqual(
            summary.compiled, [self.src / "a.tsx", self.src / "nested" / "b.tsx"]
        )
        self.assertTrue((self.src / "a.tsx").read_text(encoding="utf-8").endswith("}\n"))
        self.assertFalse((self.src / "notes.tsx").exists())

    def test_mirrors_layout_in_out_dir(self) -> None:
        out = self.tmp_path / "dist"
        summary = build_templates(self.src, out_dir=out)
        self.assertTrue(summary.ok)
        self.assertTrue((out / "nested" / "b.tsx").is_file())
        self.assertFalse((self.src / "a.tsx").exists())

    def test_failures_do_not_stop_the_build(self) -> None:
        broken = self.src / "broken.dot"
        broken.write_text("<div>{{? it.a }}</div>", encoding="utf-8")
        summary = build_templates(self.src)
        self.assertFalse(summary.ok)
        self.assertIn(broken, summary.failed)
        self.assertIn(str(broken), summary.failed[broken])
        self.assertEqual(len(summary.compiled), 2)
        self.assertFalse((self.src / "broken.tsx").exists())

    def test_generation_errors_are_recorded(self) -> None:
        broken = self.src / "late.dot"
        broken.write_text("<p></p>{{ const x = 1; }}", encoding="utf-8")
        summary = build_templates(self.src)
        self.assertIn("Unsupported Construct", summary.failed[broken])

    def test_custom_pattern_and_config(self) -> None:
        (self.src / "c.tpl").write_text("<i></i>", encoding="utf-8")
        config = CompilerConfig(function_name="Icon")
        summary = build_templates(self.src, pattern="*.tpl", config=config)
        self.assertEqual(summary.compiled, [self.src / "c.tsx"])
        self.assertIn(
            "export default function Icon(it: any)",
            (self.src / "c.tsx").read_text(encoding="utf-8"),
        )

    def test_missing_source_directory(self) -> None:
        with self.assertRaises(FileNotFoundError):
            build_templates(self.tmp_path / "missing")


if __name__ == "__main__":
    unittest.main()
