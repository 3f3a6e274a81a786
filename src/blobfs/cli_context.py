"""
CLI Context for managing application dependencies.

Provides a clean way to manage CLI-level dependencies like options and the
filesystem instance, avoiding global state and enabling dependency injection.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .filesystem import AzureFileSystem
from .settings import AzureOptions, create_options_from_env


@dataclass
class CLIContext:
    """
    Shared context for CLI commands.

    Holds the options loaded for one CLI invocation and the filesystem built
    from them, created on first use.
    """
    options: AzureOptions
    _filesystem: Optional[AzureFileSystem] = None

    @classmethod
    def from_env(cls) -> CLIContext:
        """
        Create CLI context from environment variables.

        Returns:
            CLIContext with options loaded from environment
        """
        return cls(options=create_options_from_env())

    @property
    def filesystem(self) -> AzureFileSystem:
        """
        Get or create the filesystem (lazy initialization).

        Returns:
            AzureFileSystem instance
        """
        if self._filesystem is None:
            self._filesystem = AzureFileSystem.make(self.options)
        return self._filesystem

    def close(self) -> None:
        if self._filesystem is not None:
            self._filesystem.close()
