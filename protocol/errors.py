"""Error taxonomy for action resolution and dispatch."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

CODE_SCHEMA_NOT_FOUND = "SCHEMA_NOT_FOUND"
CODE_INVALID_HANDLER = "INVALID_HANDLER"
CODE_INVALID_CONFIG = "INVALID_CONFIG"
CODE_CYCLIC_REFERENCE = "CYCLIC_REFERENCE"


class ActionError(Exception):
    code = "ACTION_ERROR"

    def __init__(self, message: str, *, origin: str = "cli_actions", context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.origin = origin
        self.context = dict(context or {})

    def __str__(self) -> str:
        text = f"{self.origin}:\n{self.message}"
        if self.context:
            text += "\n" + json.dumps(self.context, indent=2, ensure_ascii=False, default=str)
        return text


class SchemaNotFound(ActionError):
    code = CODE_SCHEMA_NOT_FOUND

    def __init__(self, name: str, *, origin: str = "cli_actions", context: dict[str, Any] | None = None) -> None:
        super().__init__(f"Cannot find action schema '{name}'", origin=origin, context=context)
        self.name = name


class InvalidHandler(ActionError):
    code = CODE_INVALID_HANDLER


class InvalidConfig(ActionError):
    code = CODE_INVALID_CONFIG

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        *,
        origin: str = "cli_actions",
        context: dict[str, Any] | None = None,
    ) -> None:
        merged = dict(context or {})
        if path is not None:
            merged.setdefault("path", str(path))
        super().__init__(message, origin=origin, context=merged)
        self.path = None if path is None else Path(path)


class CyclicSchemaReference(InvalidConfig):
    code = CODE_CYCLIC_REFERENCE

    def __init__(self, chain: list[str], *, origin: str = "cli_actions") -> None:
        super().__init__(
            "Cyclic schema reference: " + " -> ".join(chain),
            origin=origin,
            context={"chain": chain},
        )
        self.chain = list(chain)
