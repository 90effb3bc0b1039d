"""Signal the Dock to reload its wallpaper store."""

import subprocess

from macpaperd.utils.logging import logger

DEFAULT_KILLALL = "/usr/bin/killall"
DEFAULT_CONSUMER = "Dock"


def restart_dock(
    killall: str = DEFAULT_KILLALL, consumer: str = DEFAULT_CONSUMER, timeout: int = 10
) -> bool:
    """Kill the Dock so launchd restarts it and it rereads desktoppicture.db.

    Fire-and-forget: failures are logged, never raised. The store is already
    in place at this point, so the next Dock start picks it up regardless.

    Returns:
        True when the signal was delivered.
    """
    cmd = [killall, consumer]
    logger.debug("Running {}", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Could not restart {}: {}", consumer, e)
        return False

    if result.returncode != 0:
        logger.warning(
            "{} exited with {} restarting {}: {}",
            killall,
            result.returncode,
            consumer,
            result.stderr.strip(),
        )
        return False

    logger.info("Restarted {}", consumer)
    return True
