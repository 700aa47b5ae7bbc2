"""Resolution of repository access credentials."""

import logging
import os
import shlex
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ..exceptions import CredentialError

logger = logging.getLogger(__name__)


class GitCredentials(BaseModel):
    """How git should authenticate against the remote."""

    clone_url: str
    env: Dict[str, str] = Field(default_factory=dict)
    key_path: Optional[str] = None


def is_ssh_url(url: str) -> bool:
    """True for scp-style (user@host:path) and ssh:// remotes."""
    if url.startswith("ssh://"):
        return True
    if "://" in url:
        return False
    head, sep, _ = url.partition(":")
    return bool(sep) and "@" in head and "/" not in head


def build_ssh_command(key_path: str, identity: str = "") -> str:
    """Build GIT_SSH_COMMAND for a key file, without host key checks."""
    parts = [
        "ssh",
        "-i",
        key_path,
        "-o",
        "IdentitiesOnly=yes",
        "-o",
        "StrictHostKeyChecking=no",
        "-o",
        "UserKnownHostsFile=/dev/null",
    ]
    if identity:
        parts.extend(["-l", identity])
    return " ".join(shlex.quote(part) for part in parts)


def build_token_url(repo_url: str, token: str) -> str:
    """Build clone URL with token for private GitHub repositories."""
    if token and repo_url.startswith("https://github.com/"):
        repo_part = repo_url.replace("https://github.com/", "")
        return f"https://{token}@github.com/{repo_part}"
    return repo_url


def resolve_credentials(
    repo_url: str,
    key_path: str = "",
    identity: str = "",
    token: str = "",
) -> GitCredentials:
    """
    Resolve credentials for a remote.

    SSH remotes need a readable private key file; host key verification is
    switched off for them. HTTPS GitHub remotes may carry a token. Anything
    else (local paths, file:// URLs, public HTTPS) needs no credentials.

    Raises:
        CredentialError: the remote needs a key that cannot be read.
    """
    if is_ssh_url(repo_url):
        if not key_path:
            raise CredentialError(f"No SSH key configured for {repo_url}")
        path = Path(key_path).expanduser()
        if not path.is_file():
            raise CredentialError(f"SSH key not found: {path}")
        if not os.access(path, os.R_OK):
            raise CredentialError(f"SSH key not readable: {path}")
        logger.info("Using SSH key %s for %s", path, repo_url)
        return GitCredentials(
            clone_url=repo_url,
            env={"GIT_SSH_COMMAND": build_ssh_command(str(path), identity)},
            key_path=str(path),
        )

    clone_url = build_token_url(repo_url, token)
    if clone_url != repo_url:
        logger.info("Using token authentication for %s", repo_url)
    return GitCredentials(clone_url=clone_url)
