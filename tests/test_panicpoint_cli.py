#!/usr/bin/env python3
import contextlib
import io
import json
import tempfile
import unittest
import xml.etree.ElementTree as ET
from pathlib import Path
from unittest import mock
from zipfile import ZipFile

from core.deck_model import presentation_from_dict
from core.package_builder import build_package
from core.telemetry import read_events
from scripts.panicpoint import main

A = "http://schemas.openxmlformats.org/drawingml/2006/main"
P = "http://schemas.openxmlformats.org/presentationml/2006/main"
CT = "http://schemas.openxmlformats.org/package/2006/content-types"

DEMO = {"title": "Demo", "slides": [{"title": "Intro", "bullets": ["First point", "Second point"]}]}


class PanicPointCliTest(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name)
        self.events = self.root / "events.jsonl"
        self.config = self.root / "panicpoint.yaml"
        self.config.write_text(
            "output:\n"
            f"  directory: {json.dumps(str(self.root))}\n"
            "telemetry:\n"
            f"  events_file: {json.dumps(str(self.events))}\n",
            encoding="utf-8",
        )
        self.outline = self.root / "outline.json"
        self.outline.write_text(json.dumps(DEMO), encoding="utf-8")

    def tearDown(self):
        self._td.cleanup()

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(["--config", str(self.config), *argv])
        return code, out.getvalue(), err.getvalue()

    def _events(self):
        return read_events(self.events)

    def test_demo_outline_end_to_end(self):
        code, out, _ = self._run("--outline-json", str(self.outline))
        self.assertEqual(code, 0)
        pptx = self.root / "PanicPoint_Demo.pptx"
        self.assertTrue(pptx.exists())
        summary = json.loads(out)
        self.assertTrue(summary["ok"])
        self.assertEqual(summary["out_pptx"], str(pptx))
        self.assertEqual(summary["slides"], 1)
        self.assertEqual(summary["parts"], 9)

        with ZipFile(pptx) as zf:
            self.assertIsNone(zf.testzip())
            expected = [p.relative_path for p in build_package(presentation_from_dict(DEMO))]
            self.assertEqual(zf.namelist(), expected)
            for name in zf.namelist():
                ET.fromstring(zf.read(name))
            types = ET.fromstring(zf.read("[Content_Types].xml"))
            slide_overrides = [o.get("PartName") for o in types.findall(f"{{{CT}}}Override") if "slides/slide" in o.get("PartName")]
            self.assertEqual(slide_overrides, ["/ppt/slides/slide1.xml"])
            slide = ET.fromstring(zf.read("ppt/slides/slide1.xml"))
            content = slide.findall(f"{{{P}}}cSld/{{{P}}}spTree/{{{P}}}sp")[1]
            texts = [p.find(f"{{{A}}}r/{{{A}}}t").text for p in content.iter(f"{{{A}}}p")]
            self.assertEqual(texts, ["First point", "Second point"])

        events = self._events()
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0]["module"], "panicpoint")
        self.assertEqual(events[0]["status"], "ok")
        self.assertEqual(events[0]["meta"]["parts"], 9)
        self.assertEqual(events[0]["trace_id"], summary["trace_id"])

    def test_explicit_output_path(self):
        target = self.root / "custom.pptx"
        code, _, _ = self._run("--outline-json", str(self.outline), "--out-pptx", str(target), "--no-telemetry")
        self.assertEqual(code, 0)
        self.assertTrue(target.exists())
        self.assertFalse(self.events.exists())

    def test_unwritable_output_reports_archive_error(self):
        target = self.root / "nope" / "deck.pptx"
        code, out, err = self._run("--outline-json", str(self.outline), "--out-pptx", str(target))
        self.assertEqual(code, 1)
        self.assertIn("ARCHIVE_ERROR", err)
        payload = json.loads(out)
        self.assertFalse(payload["ok"])
        self.assertEqual(payload["error"]["details"]["phase"], "open")
        self.assertFalse(target.exists())
        events = self._events()
        self.assertEqual(events[0]["status"], "failed")
        self.assertEqual(events[0]["error_code"], "ARCHIVE_ERROR")

    def test_unpaired_surrogate_in_outline_is_dropped(self):
        self.outline.write_text(
            json.dumps({"title": "Demo", "slides": [{"title": "Intro", "bullets": ["bad\udcff byte"]}]}),
            encoding="utf-8",
        )
        code, _, _ = self._run("--outline-json", str(self.outline))
        self.assertEqual(code, 0)
        with ZipFile(self.root / "PanicPoint_Demo.pptx") as zf:
            slide = ET.fromstring(zf.read("ppt/slides/slide1.xml"))
            runs = [t.text for t in slide.iter(f"{{{A}}}t")]
        self.assertEqual(runs, ["Intro", "bad byte"])

    def test_unusable_events_file_does_not_fail_the_run(self):
        blocker = self.root / "blocker"
        blocker.write_text("x", encoding="utf-8")
        events = blocker / "events.jsonl"
        code, out, err = self._run("--outline-json", str(self.outline), "--events-file", str(events))
        self.assertEqual(code, 0)
        self.assertTrue(json.loads(out)["ok"])
        self.assertTrue((self.root / "PanicPoint_Demo.pptx").exists())
        self.assertIn("Telemetry not recorded", err)
        self.assertIn("TELEMETRY_ERROR", err)

    def test_unusable_events_file_keeps_the_original_error(self):
        events_dir = self.root / "events-dir"
        events_dir.mkdir()
        target = self.root / "nope" / "deck.pptx"
        code, out, err = self._run("--outline-json", str(self.outline), "--out-pptx", str(target), "--events-file", str(events_dir))
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(out)["error"]["code"], "ARCHIVE_ERROR")
        self.assertIn("Telemetry not recorded", err)
        self.assertIn("ARCHIVE_ERROR", err)

    def test_malformed_outline(self):
        self.outline.write_text("{not json", encoding="utf-8")
        code, out, _ = self._run("--outline-json", str(self.outline))
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(out)["error"]["code"], "OUTLINE_ERROR")

    def test_interactive_session(self):
        answers = iter(["Team Sync", "Agenda", "1", "Status & next steps", "", ""])
        with mock.patch("builtins.input", lambda prompt="": next(answers)):
            code, out, _ = self._run()
        self.assertEqual(code, 0)
        self.assertIn("🎉 Success! Presentation saved as:", out)
        pptx = self.root / "PanicPoint_Team_Sync.pptx"
        with ZipFile(pptx) as zf:
            slide = ET.fromstring(zf.read("ppt/slides/slide1.xml"))
            runs = [t.text for t in slide.iter(f"{{{A}}}t")]
        self.assertEqual(runs, ["Agenda", "Status & next steps"])

    def test_interactive_cancel(self):
        def eof(prompt=""):
            raise EOFError

        with mock.patch("builtins.input", eof):
            code, _, err = self._run()
        self.assertEqual(code, 1)
        self.assertIn("OUTLINE_ERROR", err)


if __name__ == "__main__":
    unittest.main()
