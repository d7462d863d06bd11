"""Git operations for sprout."""

from sprout.git.repository import (
    INITIAL_COMMIT_MESSAGE,
    initialize_git_repository,
    is_inside_work_tree,
)

__all__ = [
    "INITIAL_COMMIT_MESSAGE",
    "initialize_git_repository",
    "is_inside_work_tree",
]
