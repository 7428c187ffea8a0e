"""
Interfaces for the collaborators the guard consumes.

The host platform supplies implementations for reading the stopword list,
looking up posts, resolving the default administrator address and sending
mail. Bundled implementations live in ``filtering`` and ``notification``.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from comment_guard.domain.models import PostContext


class StopwordSource(ABC):
    """Yields the raw lines of the backing stopword list."""

    @abstractmethod
    def read_lines(self) -> List[str]:
        """Return the raw lines of the list.

        Must return an empty list, never raise, when the list is absent or
        unreadable.
        """
        pass

    def last_modified(self) -> Optional[float]:
        """Modification time of the list as a POSIX timestamp, if known."""
        return None

    @property
    def description(self) -> str:
        return self.__class__.__name__


class PostLookup(ABC):
    """Resolves a content identifier to its display title and URL."""

    @abstractmethod
    def get_post_context(self, post_id: str) -> PostContext:
        pass


class RecipientResolver(ABC):
    """Provides the platform-level administrator address."""

    @abstractmethod
    def default_recipient(self) -> Optional[str]:
        """Return the current default address.

        Called on every notification; implementations must not assume the
        value is cached.
        """
        pass


class MailSender(ABC):
    """Delivers a notification."""

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str) -> bool:
        """Attempt delivery.

        Returns:
            True when the transport accepted the message
        """
        pass

    @property
    def transport_name(self) -> str:
        return self.__class__.__name__
