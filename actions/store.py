"""Schema store: locate, parse, expand and cache action schemas."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from actions.context import DispatchContext
from actions.handlers import HandlerRegistry
from actions.schemas import (
    ActionSchema,
    ArgumentSchema,
    ProviderSpec,
    is_provider_descriptor,
    options_from_raw,
    provider_from_raw,
    schema_from_raw,
)
from config.defaults import LABEL_KEY, PROVIDER_KEY, SCHEMA_EXTENSIONS
from protocol.action_ids import action_path
from protocol.errors import CyclicSchemaReference, InvalidConfig, InvalidHandler, SchemaNotFound

logger = logging.getLogger("cli_actions.store")


class SchemaStore:
    def __init__(self, context: DispatchContext, registry: HandlerRegistry) -> None:
        self._context = context
        self._registry = registry
        self._cache: dict[str, ActionSchema] = {}
        self._provider_cache: dict[str, Any] = {}
        self._stack: list[str] = []

    def find(self, rel_path: str) -> Path | None:
        for root in self._context.roots:
            for ext in SCHEMA_EXTENSIONS:
                path = root / f"{rel_path}{ext}"
                if path.is_file():
                    return path.resolve()
        return None

    def resolve(self, action: str) -> ActionSchema | None:
        """Top-level lookup; a miss returns None so callers can fall back."""
        path = action_path(action)
        if path in self._cache:
            return self._cache[path]
        if self.find(path) is None:
            logger.debug("[SCHEMA] no schema for action=%s", action)
            return None
        return self.require(path)

    def require(self, path: str) -> ActionSchema:
        """Referenced lookup; a miss is fatal."""
        path = action_path(path)
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        if path in self._stack:
            raise CyclicSchemaReference(self._stack[self._stack.index(path):] + [path])

        filename = self.find(path)
        if filename is None:
            raise SchemaNotFound(path, context={"roots": [str(root) for root in self._context.roots]})

        self._stack.append(path)
        try:
            schema = self.build(read_schema_file(filename), path)
        finally:
            self._stack.pop()
        self._cache[path] = schema
        logger.debug("[SCHEMA] loaded action=%s file=%s args=%s", path, filename, list(schema.arguments))
        return schema

    def build(self, raw: Any, path: str) -> ActionSchema:
        """Parse a raw mapping and expand every argument's option set."""
        schema = schema_from_raw(raw, path)
        arguments = {name: self._expand_argument(info, path) for name, info in schema.arguments.items()}
        return replace(schema, arguments=arguments)

    def follow_up(self, spec: ProviderSpec, value: Any, branch: str) -> ActionSchema:
        raw = self.invoke_provider(spec, {"value": value})
        if not isinstance(raw, Mapping):
            raise InvalidConfig(
                "follow-up provider must return a schema object",
                context={"provider": self._qualified(spec), "value": value},
            )
        return self.build(raw, f"{branch}/{value}")

    def invoke_provider(self, spec: ProviderSpec, extra: dict[str, Any] | None = None) -> Any:
        """Call a registered provider once per distinct parameter set."""
        namespace = self._context.namespace_for(spec.namespace)
        registered = self._registry.get(namespace, spec.method)
        if registered is None:
            raise InvalidHandler(f"Unknown option provider '{namespace}::{spec.method}'")

        params = {**spec.params, **(extra or {}), "folder": str(registered.folder)}
        key = json.dumps([namespace, spec.method, params], sort_keys=True, default=str)
        if key in self._provider_cache:
            return self._provider_cache[key]

        logger.debug("[SCHEMA] invoking provider %s params=%s", registered.qualified_name, params)
        result = registered.invoke(params)
        self._provider_cache[key] = result
        return result

    def list_actions(self) -> list[str]:
        names: list[str] = []
        for root in self._context.roots:
            if not root.is_dir():
                continue
            for ext in SCHEMA_EXTENSIONS:
                for file in root.rglob(f"*{ext}"):
                    name = file.relative_to(root).with_suffix("").as_posix().replace("/", ":")
                    if name not in names:
                        names.append(name)
        return sorted(names)

    def _expand_argument(self, info: ArgumentSchema, path: str) -> ArgumentSchema:
        options = info.options
        if info.provider is not None:
            options = options_from_raw(self.invoke_provider(info.provider), info.name, path)
        if not isinstance(options, dict):
            return replace(info, options=options)

        expanded: dict[str, Any] = {}
        for key, value in options.items():
            if value is True:
                expanded[key] = self.require(f"{path}/{key}")
            elif value is False:
                logger.debug("[SCHEMA] option disabled action=%s arg=%s option=%s", path, info.name, key)
            elif isinstance(value, str) and value:
                expanded[key] = self.require(value)
            elif is_provider_descriptor(value):
                raw = self.invoke_provider(provider_from_raw(value[PROVIDER_KEY], path))
                built = self.build(raw, f"{path}/{key}")
                label = value.get(LABEL_KEY)
                expanded[key] = replace(built, label=label) if isinstance(label, str) and label else built
            elif isinstance(value, Mapping):
                expanded[key] = self.build(value, f"{path}/{key}")
            else:
                expanded[key] = value
        return replace(info, options=expanded)

    def _qualified(self, spec: ProviderSpec) -> str:
        return f"{self._context.namespace_for(spec.namespace)}::{spec.method}"


def read_schema_file(filename: Path) -> Any:
    try:
        text = filename.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidConfig(f"Cannot read file: {exc}", filename) from exc
    try:
        if filename.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise InvalidConfig(f"Malformed schema file: {exc}", filename) from exc
    if not isinstance(data, dict):
        raise InvalidConfig("Schema file root must be an object", filename)
    return data
