#!/usr/bin/env python3
"""Interactive outline collection for the PanicPoint generator.

Prompts for a presentation title and then for slides until an empty slide
title is entered. Each slide is either a paragraph or a bullet list. The
result is a complete ``PresentationInput``; the prompts never escape or
otherwise alter the text the user types.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.deck_model import Bullets, Paragraph, PresentationInput, SlideInput, SlideContent
from core.errors import OutlineError

Ask = Callable[[str], str]
Say = Callable[[str], None]

BANNER = r"""
     ____   __   __ _  __  ___  ____   __   __  __ _  ____
    (  _ \ / _\ (  ( \(  )/ __)(  _ \ /  \ (  )(  ( \(_  _)
     ) __//    \/    / )(( (__  ) __/(  O ) )( /    /  )(
    (__)  \_/\_/\_)__)(__)\___)(__)   \__/ (__)\_)__) (__)
"""

RULE = "=" * 50


def show_welcome(say: Say = print) -> None:
    say(BANNER)
    say("\n🚨 Your emergency PowerPoint generator for last-minute panics! 🚨")
    say("\nDon't worry! I'll help you create a professional presentation in seconds.")
    say("Pro Tip: Just press Enter with no text when you're done adding slides.")


def _read(ask: Ask, prompt: str) -> str:
    try:
        return ask(prompt).strip()
    except EOFError as exc:
        raise OutlineError("input ended before the outline was complete") from exc
    except KeyboardInterrupt as exc:
        raise OutlineError("outline entry cancelled") from exc


def ask_title(ask: Ask = input, say: Say = print) -> str:
    say(f"\n{RULE}\n")
    say("📝 Let's start with the basics:")
    while True:
        title = _read(ask, "\nWhat's the title of your presentation? ")
        if title:
            return title
        say("⚠️  The presentation needs a title! Try again.")


def ask_paragraph(ask: Ask = input, say: Say = print) -> Paragraph:
    say("\nEnter your paragraph text (press Enter when done):")
    lines: List[str] = []
    while True:
        line = _read(ask, "")
        if line:
            lines.append(line)
            continue
        if lines:
            return Paragraph("\n".join(lines))
        say("⚠️  Please add some content!")


def ask_bullets(ask: Ask = input, say: Say = print) -> Bullets:
    say("\nEnter your bullet points (one per line, blank line to finish):")
    items: List[str] = []
    while True:
        line = _read(ask, "• ")
        if line:
            items.append(line)
            continue
        if items:
            return Bullets(items)
        say("⚠️  Please add at least one bullet point!")


def ask_content(ask: Ask = input, say: Say = print) -> SlideContent | None:
    say("\nWhat content should this slide have?")
    say("1. Paragraph text")
    say("2. Bullet points")
    choice = _read(ask, "Enter choice (1 or 2): ")
    if choice == "1":
        return ask_paragraph(ask, say)
    if choice == "2":
        return ask_bullets(ask, say)
    say("⚠️  Invalid choice! Please try again.")
    return None


def ask_slides(ask: Ask = input, say: Say = print) -> List[SlideInput]:
    say(f"\n{RULE}\n")
    say("🖼️  Now let's add your slides (press Enter with no text when done)")
    slides: List[SlideInput] = []
    while True:
        say(f"\n➕ Slide #{len(slides) + 1}")
        title = _read(ask, "Slide title (or Enter to finish): ")
        if not title:
            if slides:
                return slides
            say("⚠️  You haven't added any slides yet! Add at least one.")
            continue
        content = ask_content(ask, say)
        if content is None:
            continue
        slides.append(SlideInput(title=title, content=content))
        say(f"✅ Slide added! ({len(slides)} slides total)")


def collect_presentation(ask: Ask = input, say: Say = print) -> PresentationInput:
    """Run the whole prompt sequence; raises ``OutlineError`` if input ends early."""
    title = ask_title(ask, say)
    slides = ask_slides(ask, say)
    return PresentationInput(title=title, slides=slides)
