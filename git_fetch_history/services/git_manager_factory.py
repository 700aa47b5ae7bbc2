"""Factory for creating GitManager instances."""

from pathlib import Path
from typing import Optional

from ..config.settings import Settings
from ..protocols.git_manager_protocol import GitManagerProtocol
from .credentials import GitCredentials
from .git_manager import GitManager


def create_git_manager(
    repo_url: str,
    local_path: str,
    branch: str = "main",
    credentials: Optional[GitCredentials] = None,
) -> GitManagerProtocol:
    """
    Create a GitManager for one repository/branch pair.

    Args:
        repo_url: Repository URL
        local_path: Local working copy path
        branch: Tracked branch name
        credentials: Resolved credentials; None for public or local remotes

    Returns:
        GitManagerProtocol implementation
    """
    return GitManager(repo_url, local_path, branch, credentials)


def create_git_manager_from_settings(
    settings: Settings, credentials: Optional[GitCredentials] = None
) -> GitManagerProtocol:
    """
    Create a GitManager using application settings.

    The working copy lives at LOCAL_ROOT/REPO.
    """
    return create_git_manager(
        repo_url=settings.repo_url,
        local_path=str(Path(settings.LOCAL_ROOT) / settings.REPO),
        branch=settings.BRANCH,
        credentials=credentials,
    )
