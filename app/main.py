"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

from actions.context import ActionContributor
from actions.loader import create_dispatcher
from actions.registry import ActionDispatcher
from app.host_events import INVOCATION_CLI
from common.reporting import make_reporter, show_error
from config.defaults import DEFAULT_ACTION, DEFAULT_LOG_LEVEL, PACKAGE_NAME
from config.settings import build_dispatch_context
from console.prompting import InquirerLineProvider, LineProvider, ScriptedLineProvider
from protocol.argv import parse_argv
from protocol.errors import ActionError

logger = logging.getLogger("cli_actions")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130

Setup = Callable[[ActionDispatcher], None]
VALUE_FLAGS = frozenset({"--log-level", "--schema-root", "--default-action", "--answer"})


def parse_args(argv: Sequence[str] | None = None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(
        prog=PACKAGE_NAME,
        description="Run a schema-defined action, prompting for any missing arguments",
        allow_abbrev=False,
    )
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--schema-root", action="append", default=[], type=Path, help="Extra schema folder, searched first")
    parser.add_argument("--default-action", default=DEFAULT_ACTION, help="Action to run when none is given")
    parser.add_argument("--plain", action="store_true", help="Disable rich formatting")
    parser.add_argument(
        "--answer",
        action="append",
        default=None,
        help="Scripted prompt response (repeatable); disables interactive input",
    )
    head, tail = split_tool_args(sys.argv[1:] if argv is None else list(argv))
    args, unknown = parser.parse_known_args(head)
    return args, [*unknown, *tail]


def split_tool_args(tokens: Sequence[str]) -> tuple[list[str], list[str]]:
    """Tool flags are read only before the action token; the rest belongs to the action."""
    skip = False
    for position, token in enumerate(tokens):
        if skip:
            skip = False
        elif token in VALUE_FLAGS:
            skip = True
        elif not token.startswith("-"):
            return list(tokens[:position]), list(tokens[position:])
    return list(tokens), []


def main(
    argv: Sequence[str] | None = None,
    *,
    contributors: Sequence[ActionContributor] = (),
    setup: Setup | None = None,
) -> int:
    args, rest = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    reporter, paneler, table_builder = make_reporter(use_rich=not args.plain)
    lines: LineProvider = ScriptedLineProvider(args.answer) if args.answer is not None else InquirerLineProvider()
    context = build_dispatch_context(contributors, extra_roots=args.schema_root)
    dispatcher = create_dispatcher(context, lines, reporter, table_builder)
    if setup is not None:
        setup(dispatcher)

    parsed = parse_argv(rest)
    action = parsed.action or args.default_action
    env: dict[str, Any] = {
        "action": action,
        "invocationName": PACKAGE_NAME,
        "invocationType": INVOCATION_CLI,
    }
    try:
        dispatcher.run_action(action, parsed.options, env)
    except ActionError as exc:
        logger.debug("action failed", exc_info=True)
        show_error(reporter, paneler, str(exc), title=type(exc).__name__)
        return EXIT_ERROR
    except EOFError as exc:
        show_error(reporter, paneler, str(exc) or "input closed", title="EOFError")
        return EXIT_ERROR
    except KeyboardInterrupt:
        reporter(f"\n[{PACKAGE_NAME}] interrupted")
        return EXIT_INTERRUPTED
    return EXIT_OK


def run() -> int:
    return main()


if __name__ == "__main__":
    raise SystemExit(run())
