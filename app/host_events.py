"""Adapter for actions triggered as host package-manager lifecycle events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from actions.registry import ActionDispatcher
from protocol.action_ids import LIFECYCLE_ACTIONS, method_name
from protocol.argv import OptionMap, merge_defaults, parse_argv

logger = logging.getLogger("cli_actions.host")

INVOCATION_EVENT = "event"
INVOCATION_CLI = "cli"


@dataclass
class HostEvent:
    name: str
    arguments: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)
    dev_mode: bool = True


@dataclass(frozen=True)
class Invocation:
    action: str
    options: OptionMap
    env: dict[str, Any]


def invocation_from_event(event: HostEvent, argv: Sequence[str]) -> Invocation | None:
    """Normalise an event plus the process argv into an invocation.

    The argv action must match the event name (`A:B` matches `A-B`). A
    mismatching argv action that is itself a lifecycle action is replaced by
    the event name; any other mismatch means the event is not ours.
    """
    parsed = parse_argv(argv)
    name = method_name(event.name)
    action = parsed.action or event.name
    if method_name(action) != name:
        if action not in LIFECYCLE_ACTIONS:
            logger.info("[HOST] ignoring event=%s for argv action=%s", event.name, action)
            return None
        action = event.name

    options = merge_defaults(parsed.options, event.extra)
    env = {
        "event": event,
        "action": action,
        "invocationName": name,
        "invocationType": INVOCATION_EVENT,
        "dev_mode": event.dev_mode,
    }
    return Invocation(action=action, options=options, env=env)


def auto(dispatcher: ActionDispatcher, event: HostEvent, argv: Sequence[str] | None = None) -> Any:
    """Dispatch the action named by a host event.

    Without an explicit `argv` the event name and its own arguments stand in
    for the process arguments.
    """
    tokens = [event.name, *event.arguments] if argv is None else argv
    invocation = invocation_from_event(event, tokens)
    if invocation is None:
        return None
    return dispatcher.run_action(invocation.action, invocation.options, invocation.env)
