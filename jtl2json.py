"""CLI for converting JTL documents into JSON."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from jtl import parse, parse_env, stringify

DEFAULT_INPUT_DIR = Path(".")
DEFAULT_OUTPUT_DIR = Path("out/")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse JTL documents and write their elements as JSON.")
    parser.add_argument(
        "input",
        nargs="?",
        default=str(DEFAULT_INPUT_DIR),
        help="Path to a .jtl file or a directory of them (defaults to the current directory).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=str(DEFAULT_OUTPUT_DIR),
        help="Directory where JSON files should be written (defaults to out/).",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation width (default: 2).",
    )
    parser.add_argument(
        "--env-only",
        action="store_true",
        help="Write only the ENV section values instead of the elements.",
    )
    parser.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Log scanner and parser activity to stderr.",
    )
    return parser.parse_args(argv)


def collect_inputs(path: Path) -> list[Path]:
    if path.is_dir():
        files = sorted(p for p in path.glob("*.jtl") if p.is_file())
        if not files:
            raise FileNotFoundError(f"No .jtl files found in directory: {path}")
        return files
    if path.is_file():
        return [path]
    raise FileNotFoundError(f"Input path does not exist: {path}")


def convert_document(text: str, indent: int, env_only: bool = False, verbose: bool = False) -> str:
    config = {"enable_logger": verbose}
    if env_only:
        return json.dumps(parse_env(text, config=config).as_dict(), indent=indent, ensure_ascii=False) + "\n"
    return stringify(parse(text, config=config), indent=indent) + "\n"


def generate(files: Iterable[Path], output_dir: Path, indent: int, env_only: bool, verbose: bool) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for source in files:
        text = source.read_text(encoding="utf-8")
        try:
            converted = convert_document(text, indent=indent, env_only=env_only, verbose=verbose)
        except Exception as exc:
            raise RuntimeError(f"Failed to parse {source}") from exc
        destination = output_dir / f"{source.stem}.json"
        destination.write_text(converted, encoding="utf-8")
        written.append(destination)
        try:
            display_path = destination.relative_to(Path.cwd())
        except ValueError:
            display_path = destination
        print(f"Wrote {display_path}")
    return written


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    input_path = Path(args.input)
    output_dir = Path(args.output_dir)
    files = collect_inputs(input_path)
    generate(files, output_dir, indent=args.indent, env_only=args.env_only, verbose=args.verbose)


if __name__ == "__main__":
    main()
