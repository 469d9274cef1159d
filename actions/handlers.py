"""Handler registration: (namespace, method) -> callable."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

KIND_STATIC = "static"
KIND_INSTANCE = "instance"

Handler = Callable[..., Any]


@dataclass(frozen=True)
class RegisteredHandler:
    namespace: str
    method: str
    kind: str
    target: Any
    folder: Path

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}::{self.method}"

    def invoke(self, *args: Any) -> Any:
        if self.kind == KIND_INSTANCE:
            # Instance handlers get a fresh zero-argument instance per call.
            return getattr(self.target(), self.method)(*args)
        return self.target(*args)


class HandlerRegistry:
    def __init__(self) -> None:
        self._registry: dict[tuple[str, str], RegisteredHandler] = {}

    def register(self, namespace: str, method: str, target: Handler, *, folder: Path | None = None) -> None:
        self._add(RegisteredHandler(namespace, method, KIND_STATIC, target, folder or _source_folder(target)))

    def register_instance(self, namespace: str, cls: type, *methods: str, folder: Path | None = None) -> None:
        if not methods:
            raise ValueError(f"no methods given for {cls.__name__}")
        for method in methods:
            if not callable(getattr(cls, method, None)):
                raise ValueError(f"{cls.__name__} has no method `{method}`")
            self._add(RegisteredHandler(namespace, method, KIND_INSTANCE, cls, folder or _source_folder(cls)))

    def get(self, namespace: str, method: str) -> RegisteredHandler | None:
        return self._registry.get((namespace, method))

    def _add(self, registered: RegisteredHandler) -> None:
        key = (registered.namespace, registered.method)
        if key in self._registry:
            raise ValueError(f"duplicate handler: {registered.qualified_name}")
        self._registry[key] = registered


def _source_folder(target: Any) -> Path:
    try:
        return Path(inspect.getfile(target)).resolve().parent
    except (TypeError, OSError):
        return Path.cwd()
