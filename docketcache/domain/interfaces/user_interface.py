"""Interface for interacting with the user (input/output).

Defines the contract for displaying information, errors, warnings and
cache statistics, and for reading console input, allowing different UI
implementations.
"""

import abc
from typing import Any, Mapping

# Import relevant domain models
from docketcache.domain.models.common import PromptText, ProcessedOutput, CacheStats

class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: ProcessedOutput, **kwargs: Any) -> None:
        """Displays standard output to the user.

        Args:
            output: The text to display.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_stats(self, stats: CacheStats, limits: Mapping[str, Any]) -> None:
        """Displays cache statistics.

        Args:
            stats: Snapshot returned by the cache.
            limits: Configured limits to show alongside (e.g., max size, default TTL).
        """
        pass

    @abc.abstractmethod
    def get_prompt(self, prompt_message: str = "> ") -> PromptText:
        """Gets input from the user synchronously.

        Note: For async contexts, the caller should wrap this in asyncio.to_thread.

        Args:
            prompt_message: The message to display before the input prompt.

        Returns:
            The user's input as PromptText.
        """
        pass

    def display_session_header(self) -> None:
        """Displays a header for a new console session."""
        pass

    def display_session_footer(self, command_count: int, session_duration_secs: float) -> None:
        """Displays a footer at the end of a console session.

        Args:
            command_count: Number of commands executed
            session_duration_secs: Session duration in seconds
        """
        pass
