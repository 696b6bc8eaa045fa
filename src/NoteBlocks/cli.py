from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import clipboard, frontmatter, records
from .utils import configure_logging, read_text, resolve_output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="noteblocks",
        description="Convert notes between markdown text and editor block records.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Markdown note -> JSON block records")
    parse_cmd.add_argument("input", type=str, help="Path to markdown file")
    parse_cmd.add_argument("-o", "--output", type=str, help="Output JSON path")

    format_cmd = commands.add_parser("format", help="Rewrite a note in canonical markdown")
    format_cmd.add_argument("input", type=str, help="Path to markdown file")
    format_cmd.add_argument("-o", "--output", type=str, help="Output markdown path")
    format_cmd.add_argument("--check", action="store_true", help="Exit with status 1 if the note is not canonical")

    render_cmd = commands.add_parser("render", help="JSON block records -> markdown note")
    render_cmd.add_argument("input", type=str, help="Path to JSON file")
    render_cmd.add_argument("-o", "--output", type=str, help="Output markdown path")

    paste_cmd = commands.add_parser("paste-html", help="Pasted HTML fragment -> markdown")
    paste_cmd.add_argument("input", type=str, help="Path to HTML file")
    paste_cmd.add_argument("-o", "--output", type=str, help="Output markdown path")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    logging.info("Reading %s", input_path)
    text = read_text(input_path)
    logging.debug("Input length: %d chars", len(text))

    if args.command == "parse":
        document = frontmatter.parse_note(text)
        payload = records.document_to_records(document)
        if document.metadata:
            payload["metadata"] = document.metadata
        logging.info("Parsed %d blocks", len(document.blocks))
        result = json.dumps(payload, indent=2, ensure_ascii=False, default=str) + "\n"
        suffix = ".json"
    elif args.command == "format":
        result = frontmatter.render_note(frontmatter.parse_note(text))
        if args.check:
            if result != text:
                logging.info("%s is not in canonical form", input_path)
                raise SystemExit(1)
            logging.info("%s is canonical", input_path)
            return
        suffix = ".md"
    elif args.command == "render":
        payload = json.loads(text)
        document = records.document_from_records(payload)
        metadata = payload.get("metadata") if isinstance(payload, dict) else None
        document.metadata = metadata if isinstance(metadata, dict) else None
        logging.info("Rendering %d blocks", len(document.blocks))
        result = frontmatter.render_note(document)
        suffix = ".md"
    else:
        result = clipboard.html_to_markdown(text)
        suffix = ".md"

    _write_result(result, resolve_output_path(input_path, args.output, suffix))


def _write_result(result: str, output_path: Path | None) -> None:
    if output_path is None:
        sys.stdout.write(result)
        return
    output_path.write_text(result, encoding="utf-8")
    logging.info("Done. Saved to %s", output_path)


if __name__ == "__main__":
    main()
