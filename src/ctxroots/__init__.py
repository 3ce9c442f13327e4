"""Locate the analysis context roots of a workspace."""

from .context_root import ContextRoot
from .locator import ContextLocator, InvalidArgumentError
from .resources import (
    File,
    FileSystemError,
    Folder,
    MemoryResourceProvider,
    PhysicalResourceProvider,
    Resource,
    ResourceProvider,
)
from .session import AnalysisContext, SessionBuilder
from .settings import LocatorSettings, SettingsError, load_settings

__all__ = [
    "AnalysisContext",
    "ContextLocator",
    "ContextRoot",
    "File",
    "FileSystemError",
    "Folder",
    "InvalidArgumentError",
    "LocatorSettings",
    "MemoryResourceProvider",
    "PhysicalResourceProvider",
    "Resource",
    "ResourceProvider",
    "SessionBuilder",
    "SettingsError",
    "load_settings",
]
