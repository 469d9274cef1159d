"""Unified execution runtime for resolved handlers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from actions.handlers import RegisteredHandler
from common.reporting import Reporter, echo_message


@dataclass(frozen=True)
class RuntimeConfig:
    reporter: Reporter
    logger: logging.Logger


class HandlerRuntime:
    def __init__(self, config: RuntimeConfig) -> None:
        self._config = config

    def run(self, handler: RegisteredHandler, options: dict[Any, Any], env: dict[str, Any], *, echo_result: bool = False) -> Any:
        echo_message(self._config.reporter, f"> {handler.qualified_name}", separator=True)
        try:
            result = handler.invoke(options, env)
        except Exception:
            self._config.logger.exception("[DISPATCH] handler %s failed", handler.qualified_name)
            raise
        if echo_result and result is not None:
            self._config.reporter(format_result(result))
        return result


def format_result(result: Any) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(result, indent=2, ensure_ascii=False, default=str)
