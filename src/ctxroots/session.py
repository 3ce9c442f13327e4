"""Turn context roots into analysis context descriptors."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .context_root import ContextRoot
from .settings import LocatorSettings

__all__ = ["SDK_PATH_ENV", "AnalysisContext", "SessionBuilder"]

SDK_PATH_ENV = "CTXROOTS_SDK_PATH"


@dataclass(slots=True)
class AnalysisContext:
    """Everything an analysis session needs to know about one context root."""

    root: ContextRoot
    manifest_file: Optional[str] = None
    options_file: Optional[str] = None
    sdk_path: Optional[str] = None

    @property
    def included_paths(self) -> List[str]:
        return self.root.included_paths

    @property
    def excluded_paths(self) -> List[str]:
        return self.root.excluded_paths

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain ``dict`` representation suitable for JSON output."""
        return {
            "root": self.root.root.path,
            "included": self.included_paths,
            "excluded": self.excluded_paths,
            "manifest_file": self.manifest_file,
            "options_file": self.options_file,
            "sdk_path": self.sdk_path,
        }


class SessionBuilder:
    """Build an :class:`AnalysisContext` for each located root.

    Subclass and override :meth:`build` to construct a real analysis session.
    """

    def __init__(
        self,
        *,
        settings: LocatorSettings | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.settings = settings or LocatorSettings()
        self._environ = environ if environ is not None else os.environ

    def default_sdk_path(self) -> Optional[str]:
        """Return the configured SDK path, falling back to ``CTXROOTS_SDK_PATH``."""
        if self.settings.sdk_path:
            return self.settings.sdk_path
        value = (self._environ.get(SDK_PATH_ENV) or "").strip()
        return value or None

    def build(
        self,
        root: ContextRoot,
        *,
        manifest_file: str | None = None,
        sdk_path: str | None = None,
    ) -> AnalysisContext:
        """Describe ``root``; its own manifest wins over ``manifest_file``."""
        return AnalysisContext(
            root=root,
            manifest_file=root.manifest_path or manifest_file,
            options_file=root.options_path,
            sdk_path=sdk_path or self.default_sdk_path(),
        )
