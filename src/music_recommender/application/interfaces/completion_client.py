"""
Completion Client Interface

Port interface for the LLM text-completion transport.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CompletionClient(ABC):
    """Abstract interface for a text-completion provider.

    Implementations apply their own timeout and never retry. Every transport
    failure is raised as ``CompletionError``.
    """

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send a prompt and return the raw completion text.

        Args:
            prompt: The fully rendered user prompt.

        Returns:
            The completion text, unparsed.

        Raises:
            CompletionError: If the provider fails, times out or returns nothing.
        """
        ...

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the completion service is configured.

        Returns:
            True if the service can accept requests.
        """
        ...
