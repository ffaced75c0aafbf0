"""TypeMapperRepl: interactive shell for converting literals to types.

Also provides the ``typemapper`` CLI entry point via ``main()``.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pprint import pformat
from typing import IO

from .config import OPTIONAL_MODES, Settings
from .document import Document
from .errors import ConfigError
from .pipeline import convert
from .tokenizer import bracket_depth

logger = logging.getLogger(__name__)


EXAMPLE_INPUTS = {
    "simple": """{
  "id": 1234,
  "active": true,
  "name": "Sample User",
  "tags": ["important", "customer", "priority"],
  "values": [10, 20, 30, 40.5],
  "tuple": [123, "text", true],
  "address": {
    "street": "Main Avenue",
    "number": 1000,
    "complement": null,
    "zip": "12345-678"
  },
  "contacts": [
    { "type": "email", "value": "sample@email.com" },
    { "type": "phone", "value": "11999998888" }
  ],
  "description": null,
  "misc": [1, "text", true, { "key": "value" }]
}""",
    "advanced": """const config = {
  id: 1234,
  active: true,
  name: 'Advanced Sample',
  createdAt: new Date(2023, 0, 15, 10, 30),
  tags: ['important', 'customer', 'priority'],
  values: [10, 20, 30, 40.5],
  tuple: [123, 'text', true],
  settings: {
    theme: 'dark',
    notifications: {
      email: true,
      push: false,
      frequency: 'daily',
      hours: [8, 12, 18],
    },
    locale: 'en-US',
  },
  functions: {
    greet: function (name) { return 'Hello, ' + name; },
    format: (value) => value.toUpperCase(),
  },
  pattern: /^[a-z]+$/i,
  description: null,
  optional: undefined,
  misc: [1, 'text', true, { key: 'value' }, ['a', 'b', 'c']],
};""",
}


# ---------------------------------------------------------------------------
# TypeMapperRepl class (programmatic use)
# ---------------------------------------------------------------------------

class TypeMapperRepl:
    """Stateful shell session: settings plus the documents produced so far.

    Usage::

        repl = TypeMapperRepl()
        doc = repl.eval("const user = { name: 'Ann', age: 36 };")
        print(doc.text)    # {\\n  name: string;\\n  age: number;\\n}
        repl.last.value    # {'name': 'Ann', 'age': 36}
        repl.reset()       # clear history
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.history: list[Document] = []
        self.pending: list[str] = []  # lines of an unfinished literal

    def eval(self, text: str) -> Document:
        """Convert *text* with the current settings and record the result."""
        doc = convert(text, self.settings)
        self.history.append(doc)
        return doc

    @property
    def last(self) -> Document | None:
        return self.history[-1] if self.history else None

    def reset(self) -> None:
        """Clear history and any half-entered literal."""
        self.history.clear()
        self.pending.clear()


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _fmt_document(doc: Document) -> str:
    if doc.ok:
        return doc.text
    return f"Error: {doc.error}"


def _convert_and_print(repl: TypeMapperRepl, text: str, dest: IO[str]) -> None:
    print(_fmt_document(repl.eval(text)), file=dest)


def _show_value(repl: TypeMapperRepl, dest: IO[str]) -> None:
    """Print the restored runtime value of the last conversion."""
    doc = repl.last
    if doc is None:
        print("  (nothing converted yet)", file=dest)
        return
    if not doc.ok:
        print(f"  (last conversion failed: {doc.error})", file=dest)
        return
    print(pformat(doc.value, sort_dicts=False), file=dest)


def _set_setting(repl: TypeMapperRepl, dest: IO[str], **changes) -> None:
    try:
        repl.settings = dataclasses.replace(repl.settings, **changes)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return
    name, value = next(iter(changes.items()))
    print(f"  {name} = {value}", file=dest)


def _convert_file(repl: TypeMapperRepl, filepath: str, dest: IO[str]) -> None:
    try:
        with open(filepath, encoding="utf-8") as fh:
            text = fh.read()
    except OSError as exc:
        print(f"Error reading '{filepath}': {exc}", file=sys.stderr)
        return
    _convert_and_print(repl, text, dest)


def _process_line(repl: TypeMapperRepl, line: str, dest: IO[str]) -> bool:
    """Process one input line.  Returns False when the session should end.

    Literal input is buffered in ``repl.pending`` until its brackets balance,
    so objects can be typed or pasted across several lines.
    """
    stripped = line.strip()

    if repl.pending:
        if stripped == ":cancel":
            repl.pending.clear()
            return True
        repl.pending.append(line)
        text = "\n".join(repl.pending)
        if bracket_depth(text) > 0:
            return True
        repl.pending.clear()
        _convert_and_print(repl, text, dest)
        return True

    if not stripped:
        return True

    # ── Exit ──────────────────────────────────────────────────────────────
    if stripped in (":q", ":quit"):
        return False

    # ── Control commands ──────────────────────────────────────────────────
    if stripped == ":reset":
        repl.reset()
        return True

    if stripped == ":cancel":
        return True

    if stripped == ":value":
        _show_value(repl, dest)
        return True

    if stripped.startswith(":depth"):
        arg = stripped[len(":depth"):].strip()
        try:
            depth = int(arg)
        except ValueError:
            print(f"Error: :depth expects an integer, got {arg!r}", file=sys.stderr)
            return True
        _set_setting(repl, dest, max_depth=depth)
        return True

    if stripped.startswith(":optional"):
        _set_setting(repl, dest, optional=stripped[len(":optional"):].strip())
        return True

    if stripped.startswith(":example"):
        name = stripped[len(":example"):].strip() or "simple"
        if name not in EXAMPLE_INPUTS:
            print(f"Error: unknown example {name!r} (simple, advanced)", file=sys.stderr)
            return True
        print(EXAMPLE_INPUTS[name], file=dest)
        _convert_and_print(repl, EXAMPLE_INPUTS[name], dest)
        return True

    # ── Convert a file ────────────────────────────────────────────────────
    if stripped.startswith("?<< "):
        _convert_file(repl, stripped[4:].strip(), dest)
        return True

    # ── Literal input ─────────────────────────────────────────────────────
    if bracket_depth(line) > 0:
        repl.pending.append(line)
        return True
    _convert_and_print(repl, line, dest)
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typemapper",
        description="Infer a TypeScript-style type from a JSON or JavaScript literal.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="file to convert ('-' for stdin); omit for the interactive shell",
    )
    parser.add_argument("--max-depth", type=int, help="nesting depth before types degrade to any")
    parser.add_argument("--optional", choices=OPTIONAL_MODES, help="how fields get the '?' marker")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages to stderr")
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    changes = {}
    if args.max_depth is not None:
        changes["max_depth"] = args.max_depth
    if args.optional is not None:
        changes["optional"] = args.optional
    return dataclasses.replace(settings, **changes) if changes else settings


def _run_once(repl: TypeMapperRepl, path: str) -> int:
    """Convert one file (or stdin) and return the exit status."""
    logger.debug("Converting %s with %s", path, repl.settings.to_dict())
    try:
        if path == "-":
            text = sys.stdin.read()
        else:
            with open(path, encoding="utf-8") as fh:
                text = fh.read()
    except OSError as exc:
        print(f"Error reading '{path}': {exc}", file=sys.stderr)
        return 1

    doc = repl.eval(text)
    if not doc.ok:
        print(f"Error: {doc.error}", file=sys.stderr)
        return 1
    print(doc.text)
    return 0


def _interactive(repl: TypeMapperRepl) -> None:
    dest: IO[str] = sys.stdout
    _file: IO[str] | None = None

    print(
        "typemapper  (:q to quit  |  :reset  :cancel  :value  :depth N  "
        ":optional MODE  :example NAME  |  ?<< file  ?>> file)"
    )

    while True:
        try:
            line = input("... " if repl.pending else "TM> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            repl.pending.clear()
            continue

        stripped = line.strip()

        # ── Output redirect: ?>> filepath  /  ?>> ─────────────────────────
        if not repl.pending and stripped.startswith("?>> "):
            filepath = stripped[4:].strip()
            if _file:
                _file.close()
                _file = None
                dest = sys.stdout
            try:
                _file = open(filepath, "w", encoding="utf-8")
                dest = _file
            except OSError as exc:
                print(f"Error opening '{filepath}': {exc}", file=sys.stderr)
            continue

        if not repl.pending and stripped == "?>>":
            if _file:
                _file.close()
                _file = None
            dest = sys.stdout
            continue

        if not _process_line(repl, line, dest):
            break

    if _file:
        _file.close()


def main(argv: list[str] | None = None) -> int:
    """``typemapper`` / ``python -m typemapper_core.repl``."""
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
        )

    try:
        settings = _settings_from_args(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    repl = TypeMapperRepl(settings)
    if args.file is not None:
        return _run_once(repl, args.file)

    _interactive(repl)
    return 0


if __name__ == "__main__":
    sys.exit(main())
