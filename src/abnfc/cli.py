"""Command-line interface for abnfc."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from abnfc.errors import GrammarError
from abnfc.grammar import Grammar

CONFIG_NAME = "abnfc.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    grammar_file: Path
    entry: str | None
    text: str | None
    input_file: Path | None
    prefix: bool
    debug: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="abnfc",
        description="Compile an ABNF grammar and match input against it",
    )
    p.add_argument("grammar", help="ABNF grammar file")
    p.add_argument("-r", "--rule", help="Entry rule (default: first rule in the grammar)")
    source = p.add_mutually_exclusive_group()
    source.add_argument("-t", "--text", help="Input text to match")
    source.add_argument("-i", "--input", metavar="FILE", help="File whose contents to match")
    p.add_argument(
        "--prefix",
        action="store_true",
        default=None,
        help="Accept a match of any prefix of the input",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--debug", action="store_true", help="Dump the compiled grammar to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, grammar_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else grammar_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    grammar_file = Path(args.grammar)
    grammar_dir = grammar_file.parent
    if not grammar_dir.parts:
        grammar_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, grammar_dir)

    # Entry rule: config < CLI
    entry: str | None = None
    cfg_grammar = config.get("grammar")
    if isinstance(cfg_grammar, dict):
        cfg_entry = cfg_grammar.get("entry")
        if isinstance(cfg_entry, str):
            entry = cfg_entry
    if args.rule:
        entry = args.rule

    # Prefix matching: config < CLI
    prefix = False
    cfg_match = config.get("match")
    if isinstance(cfg_match, dict):
        cfg_prefix = cfg_match.get("prefix")
        if isinstance(cfg_prefix, bool):
            prefix = cfg_prefix
    if args.prefix is not None:
        prefix = args.prefix

    return CliOptions(
        grammar_file=grammar_file,
        entry=entry,
        text=args.text,
        input_file=Path(args.input) if args.input else None,
        prefix=prefix,
        debug=args.debug,
        verbose=args.verbose,
    )


def compile_file(options: CliOptions) -> Grammar:
    """Read and compile the grammar file named by *options*."""
    from abnfc.debug import dump_grammar
    from abnfc.grammar import compile

    source = options.grammar_file.read_text(encoding="utf-8")
    grammar = compile(source, options.entry, str(options.grammar_file))

    if options.debug:
        dump_grammar(grammar)

    return grammar


def read_input(options: CliOptions) -> str | None:
    if options.text is not None:
        return options.text
    if options.input_file is not None:
        return options.input_file.read_text(encoding="utf-8")
    return None


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = resolve_options(args)
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 1

    try:
        grammar = compile_file(options)
    except GrammarError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        text = read_input(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if text is None:
        print(f"ok: {len(grammar.rules)} rules")
        return 0

    try:
        length = grammar.test(text)
    except GrammarError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if length is None:
        print(f"no match for rule '{grammar.entry}'", file=sys.stderr)
        return 2
    if not options.prefix and length != len(text):
        print(
            f"partial match for rule '{grammar.entry}': {length} of {len(text)} characters",
            file=sys.stderr,
        )
        return 2

    print(f"match: {length}")
    return 0
