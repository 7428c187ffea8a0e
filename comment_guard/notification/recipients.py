"""Default recipient resolvers."""

import os
from typing import Optional

from comment_guard.core.interfaces import RecipientResolver


class StaticRecipientResolver(RecipientResolver):
    """Always returns the same address."""

    def __init__(self, address: Optional[str]):
        self.address = address

    def default_recipient(self) -> Optional[str]:
        return self.address


class EnvRecipientResolver(RecipientResolver):
    """Reads the administrator address from the environment on every call."""

    def __init__(self, variable: str = "COMMENT_GUARD_DEFAULT_ADMIN_EMAIL"):
        self.variable = variable

    def default_recipient(self) -> Optional[str]:
        value = os.getenv(self.variable, "").strip()
        return value or None
