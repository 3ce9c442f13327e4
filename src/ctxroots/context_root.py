"""The context root record produced by :class:`ctxroots.locator.ContextLocator`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .resources import File, Folder, Resource

__all__ = ["ContextRoot"]


@dataclass(eq=False, slots=True)
class ContextRoot:
    """A folder or file whose analysis shares one manifest and options file.

    Roots compare and hash by the path they are anchored at, so a set of roots
    never holds two entries for the same location regardless of what each one
    includes or excludes.
    """

    root: Resource
    included: List[Resource] = field(default_factory=list)
    excluded: List[Resource] = field(default_factory=list)
    manifest_file: Optional[File] = None
    options_file: Optional[File] = None

    @property
    def included_paths(self) -> List[str]:
        return [resource.path for resource in self.included]

    @property
    def excluded_paths(self) -> List[str]:
        return [resource.path for resource in self.excluded]

    @property
    def manifest_path(self) -> Optional[str]:
        return self.manifest_file.path if self.manifest_file is not None else None

    @property
    def options_path(self) -> Optional[str]:
        return self.options_file.path if self.options_file is not None else None

    def is_analyzed(self, path: str) -> bool:
        """Return whether ``path`` is governed by this root.

        A path is analysed when it is, or lies inside, one of the included
        resources and is not, and does not lie inside, an excluded one.
        """
        normalized = self.root.provider.normalize(path)
        if not any(_covers(resource, normalized) for resource in self.included):
            return False
        return not any(_covers(resource, normalized) for resource in self.excluded)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain ``dict`` representation suitable for JSON output."""
        return {
            "root": self.root.path,
            "included": self.included_paths,
            "excluded": self.excluded_paths,
            "manifest_file": self.manifest_path,
            "options_file": self.options_path,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContextRoot):
            return NotImplemented
        return self.root.path == other.root.path

    def __hash__(self) -> int:
        return hash(self.root.path)


def _covers(resource: Resource, path: str) -> bool:
    if resource.path == path:
        return True
    return isinstance(resource, Folder) and resource.contains(path)
