"""Action dispatcher: resolve options, pick a handler, invoke it."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from actions.context import DispatchContext
from actions.handlers import Handler, HandlerRegistry, RegisteredHandler
from actions.resolver import OptionResolver
from actions.runtime import HandlerRuntime, RuntimeConfig
from actions.schemas import ActionSchema, HandlerRef
from actions.store import SchemaStore
from common.reporting import Reporter, TableBuilder
from protocol.action_ids import (
    ACTION_CONFIRM,
    AUTO_METHOD,
    CONFIRM_KEY,
    CONFIRM_YES,
    LIFECYCLE_ACTIONS,
    method_name,
)
from protocol.argv import OptionMap
from protocol.errors import InvalidHandler, SchemaNotFound

logger = logging.getLogger("cli_actions.dispatch")


class DispatchState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving_arguments"
    CONFIRMING = "confirming"
    READY = "ready"
    INVOKING = "invoking"
    REJECTED = "rejected"
    DONE = "done"


class ActionDispatcher:
    def __init__(
        self,
        context: DispatchContext,
        registry: HandlerRegistry,
        store: SchemaStore,
        resolver: OptionResolver,
        reporter: Reporter,
        table_builder: TableBuilder | None = None,
    ) -> None:
        self.context = context
        self.registry = registry
        self.store = store
        self.resolver = resolver
        self.reporter = reporter
        self.table_builder = table_builder
        self.state = DispatchState.IDLE
        self._runtime = HandlerRuntime(RuntimeConfig(reporter=reporter, logger=logger))

    def register(self, namespace: str, method: str, handler: Handler) -> None:
        self.registry.register(namespace, method, handler)

    def register_instance(self, namespace: str, cls: type, *methods: str) -> None:
        self.registry.register_instance(namespace, cls, *methods)

    def run_action(self, action: str, options: OptionMap, env: dict[str, Any] | None = None) -> Any:
        schema = self.store.resolve(action)
        if schema is None:
            if action not in LIFECYCLE_ACTIONS:
                raise SchemaNotFound(action, origin=self.context.default_namespace)
            # Lifecycle events without a schema go to the default handler of the same name.
            logger.info("[DISPATCH] no schema for lifecycle action=%s, using implicit handler", action)
            schema = ActionSchema(handler=HandlerRef(method=method_name(action)), source=action)
        return self.dispatch(schema, options, env)

    def dispatch(self, schema: ActionSchema, options: OptionMap, env: dict[str, Any] | None = None) -> Any:
        env = env if env is not None else {}
        self.state = DispatchState.RESOLVING
        self.resolver.fill(schema, options)

        ref = self.resolve_handler(schema, options)

        if schema.ask_confirm:
            self.state = DispatchState.CONFIRMING
            if not self.confirm():
                self.state = DispatchState.REJECTED
                logger.info("[DISPATCH] %s rejected at confirmation", schema.source)
                return None

        handler = self._checked_handler(ref)
        self.state = DispatchState.INVOKING
        try:
            return self._runtime.run(handler, options, env, echo_result=schema.echo_result)
        finally:
            self.state = DispatchState.DONE

    def resolve_handler(self, schema: ActionSchema, options: OptionMap) -> HandlerRef:
        if schema.command_key:
            selected = options.get(schema.command_key)
            definition = schema.option_definition(schema.command_key, selected)
            ref = definition.handler if isinstance(definition, ActionSchema) else None
        else:
            ref = schema.handler

        if ref is None or not ref.method:
            raise InvalidHandler(
                "Invalid empty namespace or method",
                origin=self.context.default_namespace,
                context={"action": schema.source, "commandKey": schema.command_key},
            )
        return HandlerRef(method=ref.method, namespace=self.context.namespace_for(ref.namespace))

    def confirm(self) -> bool:
        schema = self.store.require(ACTION_CONFIRM)
        answers: OptionMap = {}
        self.resolver.fill(schema, answers)
        return answers.get(CONFIRM_KEY) == CONFIRM_YES

    def _checked_handler(self, ref: HandlerRef) -> RegisteredHandler:
        namespace = self.context.namespace_for(ref.namespace)
        registered = self.registry.get(namespace, ref.method)
        if namespace in self.context.own_namespaces:
            # Re-entering the auto entry point from its own namespace would loop forever.
            if ref.method == AUTO_METHOD or registered is None:
                raise InvalidHandler(f"Invalid self method '{ref.method}'", origin=namespace)
        if registered is None:
            raise InvalidHandler(f"Unknown handler '{namespace}::{ref.method}'", origin=self.context.default_namespace)
        self.state = DispatchState.READY
        return registered

    def render_help(self, action: str | None = None) -> str:
        if action:
            schema = self.store.resolve(action)
            if schema is None:
                return f"Unknown action: {action}"
            return self._render_single_help(action, schema)

        lines = ["Available actions:"]
        for name in self.store.list_actions():
            if name != ACTION_CONFIRM:
                lines.append(f"- {name}")
        lines.append("")
        lines.append("Use `help ACTION` for details.")
        return "\n".join(lines)

    def _render_single_help(self, action: str, schema: ActionSchema) -> str:
        lines = [f"Action: {action}"]
        if schema.handler is not None and schema.handler.method:
            lines.append(f"Handler: {schema.handler.qualified(self.context.default_namespace)}")
        if schema.command_key:
            lines.append(f"Handler selected by: {schema.command_key}")
        if schema.ask_confirm:
            lines.append("Asks for confirmation")
        if not schema.arguments:
            lines.append("No arguments")
        return "\n".join(lines)


def describe_arguments(schema: ActionSchema) -> list[list[str]]:
    rows = []
    for name, info in schema.arguments.items():
        position = "" if info.index is None else str(info.index)
        choices = "|".join(info.accepted_values())
        default = repr(info.default) if info.has_default else ""
        rows.append([name, position, info.prompt, choices, default])
    return rows
