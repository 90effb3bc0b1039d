"""Exceptions raised while building and installing a wallpaper store.

Failures before the swap leave the live store untouched. Only ``SwapFailed``
with ``live_store_removed`` set means the Dock may find no store at all.
"""


class MacpaperdError(Exception):
    """Base class for every error the engine raises.

    Attributes:
        message: Human-readable error description
        details: Dict with the context needed to diagnose the failure
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageInitError(MacpaperdError):
    """Raised when the store file or one of its schema objects cannot be created."""


class NoIdentityData(MacpaperdError):
    """Raised when the provider reports no display or no workspace."""


class EncodingError(MacpaperdError):
    """Raised for a wallpaper request the Dock cannot represent."""


class BuildError(MacpaperdError):
    """Raised when filling the pictures, preferences or data tables fails."""


class ProviderError(MacpaperdError):
    """Raised when displays and workspaces cannot be discovered."""


class SwapFailed(MacpaperdError):
    """Raised when the built store cannot be moved over the live store.

    Attributes:
        stage: ``backup``, ``staging``, ``removal`` or ``placement``
        live_store_removed: True when the old store is gone, or partly gone,
            and the new one is not in place; the caller must retry before restarting the Dock.
    """

    STAGES = ("backup", "staging", "removal", "placement")

    def __init__(
        self,
        message: str,
        stage: str,
        live_store_removed: bool = False,
        details: dict | None = None,
    ):
        if stage not in self.STAGES:
            raise ValueError(f"Unknown swap stage: {stage}")
        super().__init__(message, details)
        self.stage = stage
        self.live_store_removed = live_store_removed

    @property
    def store_may_be_inconsistent(self) -> bool:
        """True when the live path no longer holds a usable store."""
        return self.live_store_removed
