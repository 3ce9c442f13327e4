"""Partition included paths into analysis context roots.

The locator runs in two steps.  First the included and excluded path lists are
resolved into folders and files: missing paths are dropped, duplicates and
paths nested inside another entry of the same list are collapsed, and included
entries covered by an exclusion are removed.  Then each included folder is
walked depth first.  The walk starts a new :class:`ContextRoot` whenever a
folder directly holds a manifest or options file, carving that folder out of
the root that encloses it.  Each included file becomes a root of its own.

Configuration files are located by nearest-ancestor search: starting at a
folder, walk up through its parents and stop at the first one that holds the
file.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .context_root import ContextRoot
from .resources import File, FileSystemError, Folder, PhysicalResourceProvider, Resource, ResourceProvider
from .session import AnalysisContext, SessionBuilder
from .settings import LocatorSettings

__all__ = ["ContextLocator", "InvalidArgumentError"]

LOGGER = logging.getLogger(__name__)

PathList = Sequence[str | os.PathLike[str]]


class InvalidArgumentError(ValueError):
    """Raised when the locator is called without any included paths."""


class ContextLocator:
    """Compute the context roots covering a set of included paths."""

    def __init__(
        self,
        resource_provider: ResourceProvider | None = None,
        *,
        settings: LocatorSettings | None = None,
        session_builder: SessionBuilder | None = None,
    ) -> None:
        self.resource_provider = resource_provider or PhysicalResourceProvider()
        self.settings = settings or LocatorSettings()
        self.session_builder = session_builder or SessionBuilder(settings=self.settings)

    def locate_contexts(
        self,
        included_paths: PathList,
        excluded_paths: PathList | None = None,
        manifest_file: str | None = None,
        sdk_path: str | None = None,
    ) -> List[AnalysisContext]:
        """Locate roots and hand each one to the session builder.

        The builder only ever sees the resolved override path, so an override
        that does not exist is ignored here just as it is for the roots.
        """
        included_list = _as_path_list(included_paths)
        if not included_list:
            raise InvalidArgumentError("There must be at least one included path")
        override = self._manifest_override(manifest_file)
        roots = self._locate_roots(included_list, excluded_paths, override)
        override_path = override.path if override is not None else None
        contexts = [
            self.session_builder.build(root, manifest_file=override_path, sdk_path=sdk_path)
            for root in roots
        ]
        LOGGER.debug("Built %d analysis context(s)", len(contexts))
        return contexts

    def locate_roots(
        self,
        included_paths: PathList,
        excluded_paths: PathList | None = None,
        manifest_file: str | None = None,
    ) -> List[ContextRoot]:
        """Return the context roots for ``included_paths`` minus ``excluded_paths``.

        Raises ``InvalidArgumentError`` when ``included_paths`` is empty.  Paths
        that do not exist are ignored, so a non-empty input can still produce an
        empty result.
        """
        included_list = _as_path_list(included_paths)
        if not included_list:
            raise InvalidArgumentError("There must be at least one included path")
        return self._locate_roots(
            included_list, excluded_paths, self._manifest_override(manifest_file)
        )

    def _locate_roots(
        self,
        included_list: List[str],
        excluded_paths: PathList | None,
        override: File | None,
    ) -> List[ContextRoot]:
        included_folders, included_files = self._resources_from_paths(included_list)
        excluded_folders, excluded_files = self._resources_from_paths(
            _as_path_list(excluded_paths or ())
        )

        included_folders = [
            folder
            for folder in included_folders
            if folder not in excluded_folders
            and not _contained_in_any(excluded_folders, folder)
            and not _contained_in_any(included_folders, folder)
        ]
        included_files = [
            file
            for file in included_files
            if not _contained_in_any(excluded_folders, file)
            and file not in excluded_files
            and not _contained_in_any(included_folders, file)
        ]

        excluded_folder_paths = {folder.path for folder in excluded_folders}
        excluded_file_paths = {file.path for file in excluded_files}

        roots: List[ContextRoot] = []
        for folder in included_folders:
            roots.extend(
                self._create_context_roots(
                    folder, excluded_folder_paths, excluded_file_paths, override
                )
            )
        for file in included_files:
            parent = file.parent
            root = ContextRoot(
                file,
                included=[file],
                manifest_file=override if override is not None else self.find_manifest_file(parent),
                options_file=self.find_options_file(parent),
            )
            LOGGER.debug("Created file context root %s", file.path)
            roots.append(root)
        return roots

    # ------------------------------------------------------------------
    # Root building
    # ------------------------------------------------------------------

    def _create_context_roots(
        self,
        folder: Folder,
        excluded_folder_paths: Set[str],
        excluded_file_paths: Set[str],
        manifest_override: File | None,
    ) -> List[ContextRoot]:
        """Walk ``folder`` and return its root followed by any nested roots."""
        top = ContextRoot(
            folder,
            included=[folder],
            manifest_file=(
                manifest_override
                if manifest_override is not None
                else self.find_manifest_file(folder)
            ),
            options_file=self.find_options_file(folder),
        )
        LOGGER.debug("Created context root %s", folder.path)
        roots = [top]

        # Each entry pairs a folder with the root that owns it and whether that
        # root is anchored at the folder.  Roots are appended when popped so
        # the result lists them in depth-first pre-order.
        stack: List[Tuple[Folder, ContextRoot, bool]] = [(folder, top, False)]
        while stack:
            current, owner, starts_root = stack.pop()
            if starts_root:
                roots.append(owner)

            pending: List[Tuple[Folder, ContextRoot, bool]] = []
            for child in self._children(current):
                if not isinstance(child, Folder):
                    if child.path in excluded_file_paths:
                        owner.excluded.append(child)
                    continue
                if self._is_skipped_folder(child, excluded_folder_paths):
                    owner.excluded.append(child)
                    continue
                nested = self._nested_root(child, owner)
                if nested is None:
                    pending.append((child, owner, False))
                else:
                    owner.excluded.append(child)
                    pending.append((child, nested, True))
            stack.extend(reversed(pending))
        return roots

    def _nested_root(self, folder: Folder, containing: ContextRoot) -> Optional[ContextRoot]:
        manifest_file = self.get_manifest_file(folder)
        options_file = self.get_options_file(folder)
        if manifest_file is None and options_file is None:
            return None
        LOGGER.debug("Created nested context root %s inside %s", folder.path, containing.root.path)
        return ContextRoot(
            folder,
            included=[folder],
            manifest_file=manifest_file or containing.manifest_file,
            options_file=options_file or containing.options_file,
        )

    def _is_skipped_folder(self, folder: Folder, excluded_folder_paths: Set[str]) -> bool:
        name = folder.short_name
        hidden_prefix = self.settings.hidden_prefix
        return (
            folder.path in excluded_folder_paths
            or bool(hidden_prefix and name.startswith(hidden_prefix))
            or name == self.settings.packages_dir_name
        )

    def _children(self, folder: Folder) -> List[Resource]:
        try:
            children = folder.children()
        except FileSystemError as error:
            # Unreadable or vanished folders contribute no descendants.
            LOGGER.debug("Skipping children of %s: %s", folder.path, error)
            return []
        return sorted(children, key=lambda resource: resource.path)

    # ------------------------------------------------------------------
    # Configuration file lookup
    # ------------------------------------------------------------------

    def find_manifest_file(self, folder: Optional[Folder]) -> Optional[File]:
        """Return the manifest file in ``folder`` or its nearest ancestor."""
        while folder is not None:
            manifest_file = self.get_manifest_file(folder)
            if manifest_file is not None:
                return manifest_file
            folder = folder.parent
        return None

    def find_options_file(self, folder: Optional[Folder]) -> Optional[File]:
        """Return the options file in ``folder`` or its nearest ancestor."""
        while folder is not None:
            options_file = self.get_options_file(folder)
            if options_file is not None:
                return options_file
            folder = folder.parent
        return None

    def get_manifest_file(self, folder: Folder) -> Optional[File]:
        return _get_file(folder, self.settings.manifest_file_name)

    def get_options_file(self, folder: Folder) -> Optional[File]:
        """Return the first options file directly inside ``folder``, if any."""
        for name in self.settings.options_file_names:
            options_file = _get_file(folder, name)
            if options_file is not None:
                return options_file
        return None

    # ------------------------------------------------------------------
    # Path resolution
    # ------------------------------------------------------------------

    def _resources_from_paths(self, paths: Iterable[str]) -> Tuple[List[Folder], List[File]]:
        """Resolve ``paths`` into existing folders and files.

        Entries nested inside an already accepted folder, and repeated
        spellings of an accepted resource, are skipped.
        """
        folders: List[Folder] = []
        files: List[File] = []
        for path in _unique_sorted_paths(paths):
            resource = self.resource_provider.resource_at(path)
            if resource is None:
                LOGGER.debug("Ignoring path that does not exist: %s", path)
                continue
            if resource in folders or resource in files or _contained_in_any(folders, resource):
                continue
            if isinstance(resource, Folder):
                folders.append(resource)
            elif isinstance(resource, File):
                files.append(resource)
        return folders, files

    def _manifest_override(self, manifest_file: str | None) -> Optional[File]:
        if manifest_file is None:
            return None
        override = self.resource_provider.get_file(manifest_file)
        if not override.exists:
            LOGGER.warning("Manifest file %s does not exist; ignoring override", manifest_file)
            return None
        return override


def _as_path_list(paths: PathList | str | os.PathLike[str] | None) -> List[str]:
    if paths is None:
        return []
    if isinstance(paths, (str, os.PathLike)):
        paths = [paths]
    return [os.fspath(path) for path in paths]


def _unique_sorted_paths(paths: Iterable[str]) -> List[str]:
    """Return the distinct non-blank ``paths`` ordered shortest first."""
    unique = {path for path in paths if path and path.strip()}
    return sorted(unique, key=lambda path: (len(path), path))


def _contained_in_any(folders: Iterable[Folder], resource: Resource) -> bool:
    return any(folder.contains(resource.path) for folder in folders)


def _get_file(folder: Folder, name: str) -> Optional[File]:
    resource = folder.child(name)
    if isinstance(resource, File) and resource.exists:
        return resource
    return None
