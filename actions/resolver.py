"""Option resolver: fill a mutable option map from a schema.

Values come from four sources, in precedence order: explicitly supplied
options (named, or positional through an argument's `index` alias), the
argument's default, and finally an interactive prompt. Invalid supplied
values for enumerated arguments are discarded and re-prompted.

Selecting an option whose definition is itself a schema pulls that branch's
arguments into the same flat option map. Every write is recorded as an
`OptionUpdate`; writes fold into the one map with last-write-wins, so a name
shared by two selected branches keeps the value written last.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from actions.schemas import ActionSchema, ArgumentSchema
from actions.store import SchemaStore
from protocol.argv import OptionMap

logger = logging.getLogger("cli_actions.resolver")

SOURCE_ALIAS = "alias"
SOURCE_DEFAULT = "default"
SOURCE_PROMPT = "prompt"


class Asker(Protocol):
    def ask(self, info: ArgumentSchema) -> str: ...


@dataclass(frozen=True)
class OptionUpdate:
    branch: str
    name: str
    value: Any
    source: str


class OptionResolver:
    def __init__(self, store: SchemaStore, asker: Asker) -> None:
        self._store = store
        self._asker = asker

    def fill(self, schema: ActionSchema, options: OptionMap) -> list[OptionUpdate]:
        updates: list[OptionUpdate] = []
        self._fill(schema, options, schema.source or "<inline>", updates)
        return updates

    def _fill(self, schema: ActionSchema, options: OptionMap, branch: str, updates: list[OptionUpdate]) -> None:
        for name, info in schema.arguments.items():
            value = options.get(name)
            if value is None and info.index is not None:
                value = options.get(info.index)
                self._assign(options, updates, OptionUpdate(branch, name, value, SOURCE_ALIAS))

            if value is not None:
                # Supplied values still pull in option branches and followUp schemas.
                if not info.options or info.is_member(value):
                    self._descend(info, value, options, branch, updates)
                    continue
                logger.debug("[RESOLVE] discarding invalid value arg=%s value=%r", name, value)

            if info.has_default:
                update = OptionUpdate(branch, name, info.default, SOURCE_DEFAULT)
            else:
                update = OptionUpdate(branch, name, self._asker.ask(info), SOURCE_PROMPT)
            self._assign(options, updates, update)
            self._descend(info, update.value, options, branch, updates)

    def _descend(
        self,
        info: ArgumentSchema,
        value: Any,
        options: OptionMap,
        branch: str,
        updates: list[OptionUpdate],
    ) -> None:
        nested = info.branch(value)
        if nested is None and info.follow_up is not None:
            nested = self._store.follow_up(info.follow_up, value, f"{branch}/{info.name}")
        if nested is not None:
            self._fill(nested, options, f"{branch}/{value}", updates)

    @staticmethod
    def _assign(options: OptionMap, updates: list[OptionUpdate], update: OptionUpdate) -> None:
        previous = options.get(update.name)
        if previous is not None and previous != update.value:
            logger.debug(
                "[RESOLVE] %s overwrites %s=%r with %r",
                update.branch,
                update.name,
                previous,
                update.value,
            )
        options[update.name] = update.value
        updates.append(update)
