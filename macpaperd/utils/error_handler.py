"""Centralized error handler for macpaperd commands."""

from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from macpaperd.store.exceptions import MacpaperdError, SwapFailed
from macpaperd.utils.exit_codes import ExitCodes
from macpaperd.utils.logging import logger

RECOVERY_GUIDANCE = (
    "The live wallpaper store was removed but the new one could not be put in place.\n"
    "Do not restart the Dock. Restore a backup (or the staged copy named above) to\n"
    "the live store path, then run `killall Dock`."
)


class StoreInconsistent(click.ClickException):
    """Click error for a swap that left no live store behind."""

    exit_code = ExitCodes.STORE_INCONSISTENT


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that logs failures and turns them into click errors."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except SwapFailed as e:
            logger.opt(exception=True).debug("Command '{}' failed", func.__name__)
            logger.error("Swap failed at {}: {}", e.stage, e.message)
            if e.live_store_removed:
                raise StoreInconsistent(f"{e.message}\n\n{RECOVERY_GUIDANCE}") from e
            raise click.ClickException(f"{e.message}\nThe live store was not changed.") from e
        except MacpaperdError as e:
            logger.opt(exception=True).debug("Command '{}' failed", func.__name__)
            if e.details:
                logger.debug("Details: {}", e.details)
            raise click.ClickException(
                f"{type(e).__name__}: {e.message}\nNothing was changed."
            ) from e
        except Exception as e:
            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=str(e),
            )
            raise click.ClickException(
                f"{type(e).__name__}: {e}\nNothing was changed."
            ) from e

    return wrapper
