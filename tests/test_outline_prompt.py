#!/usr/bin/env python3
import unittest

from core.deck_model import Bullets, Paragraph
from core.errors import OutlineError
from scripts.outline_prompt import collect_presentation


class ScriptedInput:
    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


class OutlinePromptTest(unittest.TestCase):
    def setUp(self):
        self.said = []

    def test_collects_paragraph_and_bullet_slides(self):
        ask = ScriptedInput(
            [
                "",  # empty title is refused
                "  Demo  ",
                "",  # no slides yet
                "Intro",
                "2",
                "First point",
                "Second point",
                "",
                "Story",
                "1",
                "line one",
                "line two",
                "",
                "",  # finish
            ]
        )
        deck = collect_presentation(ask, self.said.append)
        self.assertEqual(deck.title, "Demo")
        self.assertEqual([s.title for s in deck.slides], ["Intro", "Story"])
        self.assertEqual(deck.slides[0].content, Bullets(["First point", "Second point"]))
        self.assertEqual(deck.slides[1].content, Paragraph("line one\nline two"))
        self.assertIn("⚠️  The presentation needs a title! Try again.", self.said)
        self.assertIn("⚠️  You haven't added any slides yet! Add at least one.", self.said)
        self.assertIn("✅ Slide added! (2 slides total)", self.said)

    def test_invalid_choice_restarts_the_slide(self):
        ask = ScriptedInput(["Demo", "Intro", "3", "Intro", "1", "", "text", "", ""])
        deck = collect_presentation(ask, self.said.append)
        self.assertEqual(len(deck.slides), 1)
        self.assertEqual(deck.slides[0].content, Paragraph("text"))
        self.assertIn("⚠️  Invalid choice! Please try again.", self.said)
        self.assertIn("⚠️  Please add some content!", self.said)

    def test_empty_bullet_list_is_refused(self):
        ask = ScriptedInput(["Demo", "Only", "2", "", "one", "", ""])
        deck = collect_presentation(ask, self.said.append)
        self.assertEqual(deck.slides[0].content, Bullets(["one"]))
        self.assertIn("⚠️  Please add at least one bullet point!", self.said)

    def test_end_of_input_cancels(self):
        ask = ScriptedInput(["Demo", "Intro", "2", "a"])
        with self.assertRaises(OutlineError) as ctx:
            collect_presentation(ask, self.said.append)
        self.assertEqual(ctx.exception.code, "OUTLINE_ERROR")

    def test_text_is_passed_through_unescaped(self):
        ask = ScriptedInput(["R&D <plan>", "Q&A", "2", "a < b", "", ""])
        deck = collect_presentation(ask, self.said.append)
        self.assertEqual(deck.title, "R&D <plan>")
        self.assertEqual(deck.slides[0].content.items, ["a < b"])


if __name__ == "__main__":
    unittest.main()
