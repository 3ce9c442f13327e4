"""Filesystem resources consumed by the context locator.

A :class:`ResourceProvider` hands out :class:`Folder` and :class:`File`
objects for path strings.  Resources are plain values keyed by their
normalised path, so two lookups of the same location compare equal.  Two
providers ship with the package:

``PhysicalResourceProvider``
    Reads the local filesystem through :mod:`os` and :mod:`pathlib`.

``MemoryResourceProvider``
    Keeps a POSIX-style tree in memory.  Useful for tests and for callers
    that want to resolve roots against a snapshot rather than the live disk.
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from pathlib import PurePath, PurePosixPath
from typing import Dict, Iterable, List, Optional, Set

__all__ = [
    "File",
    "FileSystemError",
    "Folder",
    "MemoryResourceProvider",
    "PhysicalResourceProvider",
    "Resource",
    "ResourceProvider",
]


class FileSystemError(OSError):
    """Raised when a folder exists but its children cannot be enumerated."""


@dataclass(frozen=True, slots=True)
class Resource:
    """A file or folder at a normalised path."""

    path: str
    provider: "ResourceProvider" = field(compare=False, repr=False)

    @property
    def exists(self) -> bool:
        return self.provider.exists(self)

    @property
    def parent(self) -> Optional["Folder"]:
        """Return the enclosing folder, or ``None`` at the filesystem root."""
        parent_path = self.provider.parent_path(self.path)
        if parent_path is None:
            return None
        return self.provider.get_folder(parent_path)

    @property
    def short_name(self) -> str:
        return self.provider.short_name(self.path)

    @property
    def is_folder(self) -> bool:
        return False

    @property
    def is_file(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class File(Resource):
    """A regular file."""

    @property
    def is_file(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Folder(Resource):
    """A directory whose children can be listed."""

    @property
    def is_folder(self) -> bool:
        return True

    def children(self) -> List[Resource]:
        """Return the direct children, raising ``FileSystemError`` when unreadable."""
        return self.provider.children(self)

    def child(self, name: str) -> Resource:
        """Return the resource named ``name`` directly inside this folder.

        The returned resource may not exist; check :attr:`Resource.exists`.
        """
        return self.provider.get_resource(self.provider.join(self.path, name))

    def contains(self, path: str) -> bool:
        """Return ``True`` when ``path`` lies strictly below this folder."""
        return self.provider.contains(self, path)


class ResourceProvider:
    """Base class for the filesystem views used by the locator."""

    _flavour: type[PurePath] = PurePath

    def normalize(self, path: str | os.PathLike[str]) -> str:
        raise NotImplementedError

    def exists(self, resource: Resource) -> bool:
        raise NotImplementedError

    def is_folder_path(self, path: str) -> bool:
        raise NotImplementedError

    def children(self, folder: Folder) -> List[Resource]:
        raise NotImplementedError

    def get_file(self, path: str | os.PathLike[str]) -> File:
        return File(self.normalize(path), self)

    def get_folder(self, path: str | os.PathLike[str]) -> Folder:
        return Folder(self.normalize(path), self)

    def get_resource(self, path: str | os.PathLike[str]) -> Resource:
        """Return a folder when ``path`` is a directory, otherwise a file.

        Paths that do not exist come back as a non-existent :class:`File`.
        """
        normalized = self.normalize(path)
        if self.is_folder_path(normalized):
            return Folder(normalized, self)
        return File(normalized, self)

    def resource_at(self, path: str | os.PathLike[str]) -> Optional[Resource]:
        """Return the resource at ``path`` or ``None`` if nothing exists there."""
        resource = self.get_resource(path)
        if not resource.exists:
            return None
        return resource

    def contains(self, folder: Folder, path: str) -> bool:
        parent = self._flavour(folder.path)
        candidate = self._flavour(self.normalize(path))
        return candidate != parent and parent in candidate.parents

    def parent_path(self, path: str) -> Optional[str]:
        pure = self._flavour(path)
        parent = pure.parent
        if parent == pure:
            return None
        return str(parent)

    def short_name(self, path: str) -> str:
        return self._flavour(path).name

    def join(self, folder_path: str, name: str) -> str:
        return str(self._flavour(folder_path) / name)


class PhysicalResourceProvider(ResourceProvider):
    """Resource provider backed by the local filesystem."""

    def normalize(self, path: str | os.PathLike[str]) -> str:
        expanded = os.path.expanduser(os.fspath(path))
        return os.path.normpath(os.path.abspath(expanded))

    def exists(self, resource: Resource) -> bool:
        if isinstance(resource, Folder):
            return os.path.isdir(resource.path)
        if isinstance(resource, File):
            return os.path.isfile(resource.path)
        return os.path.exists(resource.path)

    def is_folder_path(self, path: str) -> bool:
        return os.path.isdir(path)

    def children(self, folder: Folder) -> List[Resource]:
        """List ``folder``; symbolic links to directories are left out so walks cannot loop."""
        entries: List[Resource] = []
        try:
            with os.scandir(folder.path) as iterator:
                for entry in iterator:
                    child_path = os.path.join(folder.path, entry.name)
                    if entry.is_dir(follow_symlinks=False):
                        entries.append(Folder(child_path, self))
                    elif entry.is_symlink() and entry.is_dir():
                        continue
                    else:
                        entries.append(File(child_path, self))
        except OSError as error:
            raise FileSystemError(f"Unable to list {folder.path}: {error}") from error
        return entries


class MemoryResourceProvider(ResourceProvider):
    """In-memory POSIX filesystem.

    Folders are created implicitly for every ancestor of a new file or folder.
    ``deny_listing`` marks a folder whose children cannot be read, mimicking a
    permission error on a real disk.
    """

    _flavour = PurePosixPath

    def __init__(self) -> None:
        self._folders: Set[str] = {"/"}
        self._files: Set[str] = set()
        self._children: Dict[str, Set[str]] = {"/": set()}
        self._unreadable: Set[str] = set()

    def normalize(self, path: str | os.PathLike[str]) -> str:
        value = os.fspath(path)
        if not value.startswith("/"):
            value = "/" + value
        normalized = posixpath.normpath(value)
        if normalized.startswith("//"):
            normalized = "/" + normalized.lstrip("/")
        return normalized

    def exists(self, resource: Resource) -> bool:
        if isinstance(resource, Folder):
            return resource.path in self._folders
        if isinstance(resource, File):
            return resource.path in self._files
        return resource.path in self._folders or resource.path in self._files

    def is_folder_path(self, path: str) -> bool:
        return path in self._folders

    def children(self, folder: Folder) -> List[Resource]:
        if folder.path not in self._folders:
            raise FileSystemError(f"No such folder: {folder.path}")
        if folder.path in self._unreadable:
            raise FileSystemError(f"Permission denied: {folder.path}")
        entries: List[Resource] = []
        for child_path in self._children.get(folder.path, ()):
            if child_path in self._folders:
                entries.append(Folder(child_path, self))
            else:
                entries.append(File(child_path, self))
        return entries

    def new_folder(self, path: str) -> Folder:
        """Create ``path`` and any missing ancestors, returning the folder."""
        normalized = self.normalize(path)
        if normalized in self._files:
            raise FileSystemError(f"A file already exists at {normalized}")
        self._ensure_folder(normalized)
        return Folder(normalized, self)

    def new_file(self, path: str) -> File:
        """Create an empty file and any missing ancestor folders."""
        normalized = self.normalize(path)
        if normalized in self._folders:
            raise FileSystemError(f"A folder already exists at {normalized}")
        parent = self.parent_path(normalized)
        if parent is not None:
            self._ensure_folder(parent)
            self._children[parent].add(normalized)
        self._files.add(normalized)
        return File(normalized, self)

    def new_files(self, paths: Iterable[str]) -> List[File]:
        return [self.new_file(path) for path in paths]

    def delete(self, path: str) -> None:
        """Remove a file, or a folder together with everything below it."""
        normalized = self.normalize(path)
        if normalized in self._files:
            self._files.discard(normalized)
        elif normalized in self._folders:
            pending = [normalized]
            while pending:
                current = pending.pop()
                if current in self._files:
                    self._files.discard(current)
                    continue
                pending.extend(self._children.pop(current, ()))
                self._folders.discard(current)
                self._unreadable.discard(current)
        else:
            return
        parent = self.parent_path(normalized)
        if parent is not None and parent in self._children:
            self._children[parent].discard(normalized)

    def deny_listing(self, path: str) -> None:
        """Make ``children()`` fail for the folder at ``path``."""
        self._unreadable.add(self.new_folder(path).path)

    def _ensure_folder(self, path: str) -> None:
        missing: List[str] = []
        current: Optional[str] = path
        while current is not None and current not in self._folders:
            if current in self._files:
                raise FileSystemError(f"A file already exists at {current}")
            missing.append(current)
            current = self.parent_path(current)
        for folder in reversed(missing):
            parent = self.parent_path(folder)
            self._folders.add(folder)
            self._children.setdefault(folder, set())
            if parent is not None:
                self._children[parent].add(folder)
