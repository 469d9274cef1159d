"""Schema model for declarative action definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from config.defaults import (
    ARGS_KEY,
    ASK_CONFIRM_KEY,
    COMMAND_KEY,
    DEFAULT_PROMPT,
    DISPLAY_ARRAY,
    DISPLAY_LIST,
    ECHO_RESULT_KEY,
    FOLLOW_UP_KEY,
    HANDLER_KEY,
    LABEL_KEY,
    PROVIDER_KEY,
    SCHEMA_KEYS,
)
from protocol.errors import InvalidConfig

# Raw option sets keep their file form until the store expands them.
OptionSet = tuple[str, ...] | dict[str, Any]


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class HandlerRef:
    method: str = ""
    namespace: str | None = None

    def qualified(self, default_namespace: str) -> str:
        return f"{self.namespace or default_namespace}::{self.method}"


@dataclass(frozen=True)
class ProviderSpec:
    method: str
    namespace: str | None = None
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ArgumentSchema:
    name: str
    prompt: str = DEFAULT_PROMPT
    index: int | None = None
    display_type: str = DISPLAY_ARRAY
    options: OptionSet | None = None
    select_by_index: bool = False
    default: Any = MISSING
    provider: ProviderSpec | None = None
    follow_up: ProviderSpec | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def accepted_values(self) -> list[str]:
        if not self.options:
            return []
        return list(self.options)

    def is_member(self, value: Any) -> bool:
        if not self.options or isinstance(value, (dict, list)):
            return False
        return value in self.options

    def branch(self, value: Any) -> ActionSchema | None:
        """Nested schema contributed by selecting `value`, if any."""
        if not isinstance(self.options, dict) or isinstance(value, (dict, list)):
            return None
        definition = self.options.get(value)
        return definition if isinstance(definition, ActionSchema) else None

    def labels(self) -> list[str]:
        if not self.options:
            return []
        if not isinstance(self.options, dict):
            return [str(item) for item in self.options]
        labels = []
        for key, definition in self.options.items():
            if isinstance(definition, ActionSchema) and definition.label:
                labels.append(definition.label)
            elif isinstance(definition, Mapping) and isinstance(definition.get(LABEL_KEY), str):
                labels.append(definition[LABEL_KEY])
            else:
                labels.append(str(key))
        return labels


@dataclass(frozen=True)
class ActionSchema:
    arguments: dict[str, ArgumentSchema] = field(default_factory=dict)
    handler: HandlerRef | None = None
    command_key: str | None = None
    ask_confirm: bool = False
    echo_result: bool = False
    label: str | None = None
    source: str | None = None

    def option_definition(self, name: str, value: Any) -> Any:
        info = self.arguments.get(name)
        if info is None or not isinstance(info.options, dict) or isinstance(value, (dict, list)):
            return None
        return info.options.get(value)


def schema_from_raw(raw: Any, source: str | None = None) -> ActionSchema:
    """Parse one schema mapping; option sets are left unexpanded."""
    if not isinstance(raw, Mapping):
        raise InvalidConfig("Action schema must be an object", source)

    if ARGS_KEY in raw:
        args_raw = raw[ARGS_KEY] or {}
        if not isinstance(args_raw, Mapping):
            raise InvalidConfig(f"field `{ARGS_KEY}` must be an object", source)
    else:
        # Legacy flat form: every object entry that is not a schema key is an argument.
        args_raw = {
            key: value for key, value in raw.items() if key not in SCHEMA_KEYS and isinstance(value, Mapping)
        }

    arguments = {str(name): argument_from_raw(str(name), spec, source) for name, spec in args_raw.items()}

    command_key = raw.get(COMMAND_KEY)
    if command_key is not None and (not isinstance(command_key, str) or command_key not in arguments):
        raise InvalidConfig(f"field `{COMMAND_KEY}` must name a declared argument", source, context={COMMAND_KEY: command_key})

    label = raw.get(LABEL_KEY)
    return ActionSchema(
        arguments=arguments,
        handler=handler_from_raw(raw.get(HANDLER_KEY), source),
        command_key=command_key,
        ask_confirm=bool(raw.get(ASK_CONFIRM_KEY, False)),
        echo_result=bool(raw.get(ECHO_RESULT_KEY, False)),
        label=label if isinstance(label, str) else None,
        source=source,
    )


def argument_from_raw(name: str, raw: Any, source: str | None = None) -> ArgumentSchema:
    if not isinstance(raw, Mapping):
        raise InvalidConfig(f"argument `{name}` must be an object", source)

    index = raw.get("index", raw.get("positionalIndex"))
    if index is not None:
        if isinstance(index, str) and index.isdigit():
            index = int(index)
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise InvalidConfig(f"argument `{name}`: `index` must be a non-negative integer", source)

    display_type = raw.get("displayType", DISPLAY_ARRAY)
    if display_type not in (DISPLAY_LIST, DISPLAY_ARRAY):
        raise InvalidConfig(f"argument `{name}`: `displayType` must be `list` or `array`", source)

    if "defaultValue" in raw:
        default = raw["defaultValue"]
    else:
        default = raw.get("value", MISSING)
    if default is None:
        default = MISSING

    prompt = raw.get("prompt", DEFAULT_PROMPT)
    return ArgumentSchema(
        name=name,
        prompt=str(prompt),
        index=index,
        display_type=display_type,
        options=options_from_raw(raw.get("options"), name, source),
        select_by_index=bool(raw.get("selectByIndex", False)),
        default=default,
        provider=provider_from_raw(raw.get(PROVIDER_KEY), source),
        follow_up=provider_from_raw(raw.get(FOLLOW_UP_KEY), source),
    )


def options_from_raw(raw: Any, name: str, source: str | None = None) -> OptionSet | None:
    if raw is None or raw is False:
        return None
    if isinstance(raw, Mapping):
        return {str(key): value for key, value in raw.items()}
    if isinstance(raw, (list, tuple)):
        return tuple(str(item) for item in raw)
    raise InvalidConfig(f"argument `{name}`: `options` must be a list or an object", source)


def handler_from_raw(raw: Any, source: str | None = None) -> HandlerRef | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        namespace, sep, method = raw.rpartition("::")
        return HandlerRef(method=method, namespace=namespace if sep else None)
    if not isinstance(raw, Mapping):
        raise InvalidConfig(f"field `{HANDLER_KEY}` must be a string or an object", source)
    method = raw.get("method", raw.get("methodName", ""))
    namespace = raw.get("namespace")
    return HandlerRef(method=str(method or ""), namespace=str(namespace) if namespace else None)


def provider_from_raw(raw: Any, source: str | None = None) -> ProviderSpec | None:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidConfig("provider descriptor must be an object", source)
    method = raw.get("method")
    if not isinstance(method, str) or method.strip() == "":
        raise InvalidConfig("provider descriptor requires a `method`", source, context={"provider": dict(raw)})
    params = raw.get("params") or {}
    if not isinstance(params, Mapping):
        raise InvalidConfig("provider `params` must be an object", source)
    namespace = raw.get("namespace")
    return ProviderSpec(method=method.strip(), namespace=str(namespace) if namespace else None, params=dict(params))


def is_provider_descriptor(value: Any) -> bool:
    return isinstance(value, Mapping) and PROVIDER_KEY in value and set(value) <= {PROVIDER_KEY, LABEL_KEY}
