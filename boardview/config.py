"""Configuration constants for boardview."""
import logging
import os
import subprocess
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# Default board file, overridable from the environment
DEFAULT_BOARD_FILE = Path(os.environ.get("BOARDVIEW_FILE", PROJECT_ROOT / "board.pcb"))

# Server settings
DEFAULT_HOST = "0.0.0.0"
BASE_PORT = 8000

# Logging
LOG_LEVEL = os.environ.get("BOARDVIEW_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Load switches
FOLD_BOARD = os.environ.get("BOARDVIEW_FOLD", "").lower() in ("1", "true", "yes", "on")
RESOLVE_PIN_ORIENTATION = True


def get_port_from_git_branch() -> int:
    """
    Determine server port based on current git branch.

    - main: 8000
    - *-a: 8001
    - *-b: 8002
    - etc.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            capture_output=True,
            text=True,
            cwd=PROJECT_ROOT,
        )
        branch = result.stdout.strip()
    except OSError:
        return BASE_PORT

    if branch == "main":
        return BASE_PORT

    # Check for branch ending in -<letter>
    if len(branch) >= 2 and branch[-2] == "-":
        suffix = branch[-1].lower()
        if suffix.isalpha():
            return BASE_PORT + ord(suffix) - ord('a') + 1

    return BASE_PORT


DEFAULT_PORT = get_port_from_git_branch()


def configure_logging(level: str | int = LOG_LEVEL) -> None:
    """Install a stream handler on the root logger. Entry points only."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
