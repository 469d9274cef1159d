from __future__ import annotations

from typing import Any

from rich.console import Console

from actions.registry import ActionDispatcher
from config.defaults import BASE_NAMESPACE

DUMMY_MESSAGE = "The dummy test works!"


class DummyActions:
    """Smoke-test action, constructed fresh for every call."""

    def dummy_test(self, _options: dict[Any, Any], _env: dict[str, Any]) -> str:
        Console().print(f"\n[green]{DUMMY_MESSAGE}[/green]\n")
        return DUMMY_MESSAGE


def register(dispatcher: ActionDispatcher) -> None:
    dispatcher.register_instance(BASE_NAMESPACE, DummyActions, "dummy_test")
