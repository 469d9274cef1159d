"""Command-line token codec: raw argv -> (action, option map)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

OptionKey = str | int
OptionMap = dict[OptionKey, Any]

FLAG_PREFIX = "--"


@dataclass(frozen=True)
class ParsedArgv:
    action: str
    options: OptionMap = field(default_factory=dict)


def parse_argv(tokens: Sequence[str]) -> ParsedArgv:
    """Split tokens into the action name, positional and named options.

    The first non-flag token is the action. Later non-flag tokens are keyed by
    their 0-based position among non-flag tokens after the action. `--key=value`
    splits at the first `=`; a bare `--key` is a boolean flag.
    """
    action = ""
    options: OptionMap = {}
    position = 0
    for token in tokens:
        if token.startswith(FLAG_PREFIX):
            body = token[len(FLAG_PREFIX):]
            if not body:
                continue
            key, sep, value = body.partition("=")
            options[key] = value if sep else True
            continue
        if not action:
            action = token
            continue
        options[position] = token
        position += 1
    return ParsedArgv(action=action, options=options)


def merge_defaults(options: OptionMap, defaults: dict[str, Any] | None) -> OptionMap:
    """Environment defaults lose against explicitly supplied options."""
    if not defaults:
        return options
    merged: OptionMap = dict(defaults)
    merged.update(options)
    return merged
