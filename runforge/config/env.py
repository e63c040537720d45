from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

from .types import EnvFileError

logger = logging.getLogger(__name__)


def load_env_file(path: str | None = None) -> None:
    """Load environment variables for the commands about to run.

    An explicit ``path`` must point at a readable file. Without one, ``.env``
    in the current directory is picked up when it exists. Variables already
    set in the environment are never overridden.
    """
    if path:
        env_path = Path(path).expanduser()
        if not env_path.is_file():
            raise EnvFileError(path, "file not found")
        try:
            load_dotenv(env_path, override=False)
        except (OSError, UnicodeDecodeError) as exc:
            raise EnvFileError(path, str(exc)) from exc
        logger.debug("Loaded env file %s", env_path)
        return

    default_path = Path.cwd() / ".env"
    if default_path.is_file():
        try:
            load_dotenv(default_path, override=False)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping %s: %s", default_path, exc)
            return
        logger.debug("Loaded env file %s", default_path)
