"""Explicit dispatch context: schema roots and handler namespaces."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from config.defaults import CWD_SETTINGS_DIR


@dataclass(frozen=True)
class ActionContributor:
    """A namespace that contributes handlers and a schema root."""

    namespace: str
    root: Path


@dataclass(frozen=True)
class DispatchContext:
    roots: tuple[Path, ...]
    default_namespace: str
    own_namespaces: frozenset[str]

    @classmethod
    def from_contributors(
        cls,
        contributors: Sequence[ActionContributor],
        *,
        extra_roots: Iterable[Path] = (),
        cwd: Path | None = None,
    ) -> "DispatchContext":
        """Compose roots child-before-parent, then the working-directory fallback.

        `contributors` is ordered like a class hierarchy walk: the invoking
        contributor first, its ancestors after it.
        """
        if not contributors:
            raise ValueError("at least one contributor is required")
        fallback = (cwd or Path.cwd()) / CWD_SETTINGS_DIR
        candidates = [*extra_roots, *(item.root for item in contributors), fallback]
        roots: list[Path] = []
        for root in candidates:
            path = Path(root).expanduser()
            if path not in roots:
                roots.append(path)
        return cls(
            roots=tuple(roots),
            default_namespace=contributors[0].namespace,
            own_namespaces=frozenset(item.namespace for item in contributors),
        )

    def namespace_for(self, namespace: str | None) -> str:
        return namespace or self.default_namespace
