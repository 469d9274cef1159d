from __future__ import annotations

from typing import Any

from actions.registry import ActionDispatcher, describe_arguments
from common.reporting import render_table
from config.defaults import BASE_NAMESPACE
from protocol.action_ids import ACTION_HELP

ARGUMENT_COLUMNS = ("Argument", "Position", "Prompt", "Options", "Default")


def register(dispatcher: ActionDispatcher) -> None:
    def _handler(options: dict[Any, Any], _env: dict[str, Any]) -> None:
        target = options.get("action")
        target_action = None if not isinstance(target, str) else target.strip() or None
        dispatcher.reporter(dispatcher.render_help(target_action))
        if target_action is None:
            return

        schema = dispatcher.store.resolve(target_action)
        if schema is None or not schema.arguments:
            return
        dispatcher.reporter(
            render_table(
                dispatcher.table_builder,
                title="Arguments",
                columns=ARGUMENT_COLUMNS,
                rows=describe_arguments(schema),
            )
        )

    dispatcher.register(BASE_NAMESPACE, ACTION_HELP, _handler)
