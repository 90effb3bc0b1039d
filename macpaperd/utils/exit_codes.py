"""Centralized exit codes for the macpaperd CLI."""


class ExitCodes:
    """Standard exit codes for macpaperd CLI commands."""

    SUCCESS = 0

    FAILED = 1

    STORE_INCONSISTENT = 3

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - wallpaper store replaced",
            cls.FAILED: "Failed - the live store was not changed",
            cls.STORE_INCONSISTENT: "Live store was removed but not replaced - manual recovery needed",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
