# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
Command line driver.

With a text argument, parses it and prints the resulting tree
and the regenerated markdown. Without one, starts a simple REPL: lines are
collected until a blank line, then the collected message is parsed.

.. code-block:: console

   $ python -m chatmark '**bar _foo_**'

"""

from __future__ import annotations

import argparse
import logging
import sys

import chatmark
import chatmark.config
import chatmark.errors
import chatmark.parser
from chatmark import _typing as _t

__all__ = [
    "main",
    "repl",
    "run",
]


def _make_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatmark",
        description="Parse chat-flavored markdown and print the resulting tree.",
    )
    parser.add_argument(
        "text",
        nargs="?",
        help="text to parse; if omitted, read messages from stdin",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="fail on text that no rule accepts instead of dropping it",
    )
    parser.add_argument(
        "--rules",
        metavar="NAME[,NAME...]",
        help="comma-separated list of rules to use, in order of priority",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        dest="verbosity_level",
        help="increase verbosity, pass twice to see parser traces",
    )
    parser.add_argument(
        "--debug-file",
        metavar="PATH",
        help="write parser traces to the given file",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {chatmark.__version__}"
    )
    return parser


def _load_config(namespace: argparse.Namespace) -> chatmark.config.ParserConfig:
    config = chatmark.config.ParserConfig.load_from_env()
    if namespace.strict is not None:
        config.strict = namespace.strict
    if namespace.rules is not None:
        config = chatmark.config.ParserConfig(
            strict=config.strict,
            rules=[name for name in namespace.rules.split(",") if name.strip()],
        )
    return config


def _report(parser: chatmark.parser.Parser, text: str, out: _t.TextIO):
    forest = parser.parse(text)
    print("Result:", file=out)
    print(forest.dump(), file=out)
    print(f"Input: {text}", file=out)
    print(f"Generated: {forest.as_markdown()!r}", file=out)


def repl(parser: chatmark.parser.Parser, stdin: _t.TextIO, stdout: _t.TextIO):
    """
    Read messages separated by blank lines from ``stdin``, and report
    each one to ``stdout``.

    """

    def flush():
        if buffer:
            print("===========", file=stdout)
            _report(parser, buffer.strip(), stdout)
            print("+++++++++++", file=stdout)

    buffer = ""
    for line in stdin:
        if line.strip():
            buffer += "\n" + line.rstrip("\r\n")
        else:
            flush()
            buffer = ""
    flush()


def main(
    args: _t.Sequence[str] | None = None,
    /,
    *,
    stdin: _t.TextIO | None = None,
    stdout: _t.TextIO | None = None,
    stderr: _t.TextIO | None = None,
) -> int:
    """
    Run the command line driver, return exit code.

    """

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    arg_parser = _make_arg_parser()
    namespace = arg_parser.parse_args(args)

    logging_level = {0: logging.WARNING, 1: logging.INFO}.get(
        namespace.verbosity_level, logging.DEBUG
    )
    logging.basicConfig(stream=stderr, level=logging_level)
    if logging_level == logging.DEBUG or namespace.debug_file:
        chatmark.enable_internal_logging(
            path=namespace.debug_file, level="DEBUG", propagate=True
        )

    try:
        parser = chatmark.parser.Parser.from_config(_load_config(namespace))
        if namespace.text is not None:
            _report(parser, namespace.text, stdout)
        else:
            repl(parser, stdin, stdout)
    except chatmark.errors.ChatmarkError as e:
        print(f"error: {e}", file=stderr)
        return 1

    return 0


def run() -> _t.NoReturn:
    """
    Entry point for the ``chatmark`` console script.

    """

    sys.exit(main())
