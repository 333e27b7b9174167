"""Command line entry point: build HTML, export PPTX, inspect deck structure."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import build_config
from .deck_store import DeckStore
from .exceptions import DeckError
from .pptx_exporter import DeckPptxExporter
from .plugins import PluginManager
from .renderer import DeckHtmlRenderer
from .slide_models import Deck, LeafSlide


def _parse_option(text: str) -> tuple:
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    name, value = text.split("=", 1)
    return name.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdslides",
        description="Render reveal.js style markdown decks.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Render a deck to a standalone HTML page")
    build.add_argument("input", help="Markdown deck (or JSON snapshot)")
    build.add_argument("output", nargs="?", help="Output HTML path (default: input with .html)")
    build.add_argument(
        "-o",
        "--option",
        action="append",
        default=[],
        type=_parse_option,
        metavar="NAME=VALUE",
        help="Presentation option override, may be repeated",
    )

    export = subparsers.add_parser("export", help="Export a deck to a PPTX handout")
    export.add_argument("input", help="Markdown deck (or JSON snapshot)")
    export.add_argument("output", nargs="?", help="Output PPTX path (default: input with .pptx)")
    export.add_argument("--template", help="PPTX template to build on")

    inspect = subparsers.add_parser("inspect", help="Print deck structure and parse warnings")
    inspect.add_argument("input", help="Markdown deck (or JSON snapshot)")
    return parser


def describe(deck: Deck) -> List[str]:
    """Human readable outline of ``deck``."""

    if deck.is_empty:
        return ["(no slides)"]
    lines = []
    for h, slide in enumerate(deck.slides):
        if isinstance(slide, LeafSlide):
            lines.append(f"{h + 1}. {slide.title or '(untitled)'}{_notes_flag(slide)}")
            continue
        lines.append(f"{h + 1}. group of {len(slide.leaves)}")
        for v, leaf in enumerate(slide.leaves):
            lines.append(f"   {h + 1}.{v + 1} {leaf.title or '(untitled)'}{_notes_flag(leaf)}")
    return lines


def _notes_flag(leaf: LeafSlide) -> str:
    return " [notes]" if leaf.notes else ""


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    try:
        deck = DeckStore(input_path).load()

        if args.command == "inspect":
            for line in describe(deck):
                print(line)
            for warning in deck.warnings:
                print(f"warning: {warning}")
            return 0

        if args.command == "build":
            output_path = Path(args.output) if args.output else input_path.with_suffix(".html")
            config = build_config(dict(args.option))
            capabilities = PluginManager().load_now()
            page = DeckHtmlRenderer(config, capabilities).render_document(deck)
            output_path.write_text(page, encoding="utf-8")
            print(f"Done! Created {output_path} ({len(deck)} slides)")
            return 0

        output_path = Path(args.output) if args.output else input_path.with_suffix(".pptx")
        stream = DeckPptxExporter(args.template).render_deck(deck)
        output_path.write_bytes(stream.getvalue())
        print(f"Done! Created {output_path} ({deck.total_leaves()} slides)")
        return 0
    except (DeckError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
