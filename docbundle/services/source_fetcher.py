"""Fetch the documentation repository with a shallow git clone."""

import logging
import subprocess
from pathlib import Path

from ..exceptions import SourceFetchError

logger = logging.getLogger(__name__)


def fetch_source(repo_url: str, destination: Path, branch: str = "main") -> Path:
    """Clone *branch* of *repo_url* into *destination* (depth 1).

    *destination* must not exist or be empty; git refuses anything else.

    Raises:
        SourceFetchError: git is missing or the clone failed.
    """
    logger.info("Cloning %s (%s)...", repo_url, branch)
    try:
        subprocess.run(
            [
                "git", "clone", "--depth=1", f"--branch={branch}",
                "--single-branch", repo_url, str(destination),
            ],
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise SourceFetchError(repo_url, "git executable not found") from e
    except subprocess.CalledProcessError as e:
        reason = (e.stderr or "").strip().splitlines()
        raise SourceFetchError(repo_url, reason[-1] if reason else f"exit code {e.returncode}") from e

    return destination
