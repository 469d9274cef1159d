"""Build the dispatch context from contributors, flags and environment."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from actions import SETTINGS_DIR
from actions.context import ActionContributor, DispatchContext
from config.defaults import BASE_NAMESPACE, SCHEMA_PATH_ENV

logger = logging.getLogger("cli_actions.settings")


def base_contributor() -> ActionContributor:
    return ActionContributor(namespace=BASE_NAMESPACE, root=SETTINGS_DIR)


def env_schema_roots(environ: Mapping[str, str] | None = None) -> list[Path]:
    raw = (environ if environ is not None else os.environ).get(SCHEMA_PATH_ENV, "")
    return [Path(item) for item in raw.split(os.pathsep) if item.strip()]


def build_dispatch_context(
    contributors: Sequence[ActionContributor] = (),
    *,
    extra_roots: Iterable[Path] = (),
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> DispatchContext:
    """Flag roots first, then environment roots, then contributors child-to-parent.

    The base contributor is always the last ancestor so the reserved `confirm`
    and `help` schemas resolve.
    """
    chain = [item for item in contributors if item.namespace != BASE_NAMESPACE]
    chain.append(base_contributor())
    roots = [*extra_roots, *env_schema_roots(environ)]
    context = DispatchContext.from_contributors(chain, extra_roots=roots, cwd=cwd)
    logger.debug("[SETTINGS] schema roots=%s default_namespace=%s", [str(r) for r in context.roots], context.default_namespace)
    return context
