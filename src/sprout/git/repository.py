"""Git repository initialization for new projects."""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit from sprout"
DEFAULT_BRANCH = "main"


def run_git(project_path: Path, *args: str) -> bool:
    """Run a git command in ``project_path``.

    Returns True on a zero exit code, False on failure or if git is missing.
    """
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=project_path,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug("git %s failed to start: %s", " ".join(args), e)
        return False
    if result.returncode != 0:
        logger.debug(
            "git %s exited %d: %s", " ".join(args), result.returncode, result.stderr
        )
        return False
    return True


def is_inside_work_tree(path: Path) -> bool:
    """Check if path is already inside a git work tree."""
    return run_git(path, "rev-parse", "--is-inside-work-tree")


def initialize_git_repository(project_path: Path) -> bool:
    """Create a git repository with an initial commit.

    Steps run in order and stop at the first failure:
    1. Skip if the project is already inside a work tree
    2. git init
    3. Create the main branch if init.defaultBranch is not configured
    4. git add -A
    5. git commit

    Returns True if the initial commit was created.
    """
    if is_inside_work_tree(project_path):
        logger.debug("%s is inside an existing work tree", project_path)
        return False

    if not run_git(project_path, "init"):
        return False

    if not run_git(project_path, "config", "init.defaultBranch"):
        run_git(project_path, "checkout", "-b", DEFAULT_BRANCH)

    if not run_git(project_path, "add", "-A"):
        return False

    return run_git(project_path, "commit", "-m", INITIAL_COMMIT_MESSAGE)
