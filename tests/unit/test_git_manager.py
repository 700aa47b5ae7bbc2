"""Unit tests for GitManager class."""

from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest
from git.exc import GitCommandError

from git_fetch_history.exceptions import TransportError
from git_fetch_history.models import ChunkType
from git_fetch_history.protocols.git_manager_protocol import GitManagerProtocol
from git_fetch_history.services.credentials import GitCredentials
from git_fetch_history.services.git_manager import GitManager, to_commit_info


class TestGitManager:
    """Test cases for GitManager class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.repo_url = "git@bitbucket.org:team/repo.git"
        self.local_path = "/tmp/test_repo"
        self.branch = "main"
        self.credentials = GitCredentials(
            clone_url=self.repo_url, env={"GIT_SSH_COMMAND": "ssh -i key"}
        )
        self.git_manager = GitManager(
            self.repo_url, self.local_path, self.branch, self.credentials
        )

    def test_init(self):
        """Test GitManager initialization."""
        assert self.git_manager.repo_url == self.repo_url
        assert self.git_manager.local_path == Path(self.local_path)
        assert self.git_manager.branch == self.branch
        assert self.git_manager.repo is None
        assert isinstance(self.git_manager, GitManagerProtocol)

    def test_default_credentials(self):
        manager = GitManager("/srv/git/repo", "/tmp/x")

        assert manager.credentials.clone_url == "/srv/git/repo"
        assert manager.credentials.env == {}

    @patch("git_fetch_history.services.git_manager.shutil.rmtree")
    @patch("git_fetch_history.services.git_manager.Repo")
    @patch("pathlib.Path.mkdir")
    @patch("pathlib.Path.exists")
    def test_setup_repository_replaces_old_copy(
        self, mock_exists, mock_mkdir, mock_repo_class, mock_rmtree
    ):
        """An existing working copy is deleted before cloning."""
        mock_exists.return_value = True
        mock_repo = Mock()
        mock_repo_class.clone_from.return_value = mock_repo

        self.git_manager.setup_repository()

        mock_rmtree.assert_called_once_with(Path(self.local_path))
        assert self.git_manager.repo == mock_repo
        mock_repo_class.clone_from.assert_called_once_with(
            self.repo_url,
            Path(self.local_path),
            branch=self.branch,
            env={"GIT_SSH_COMMAND": "ssh -i key"},
        )

    @patch("git_fetch_history.services.git_manager.shutil.rmtree")
    @patch("git_fetch_history.services.git_manager.Repo")
    @patch("pathlib.Path.mkdir")
    @patch("pathlib.Path.exists")
    def test_setup_repository_clone_new(
        self, mock_exists, mock_mkdir, mock_repo_class, mock_rmtree
    ):
        mock_exists.return_value = False

        self.git_manager.setup_repository()

        mock_rmtree.assert_not_called()
        mock_repo_class.clone_from.assert_called_once()

    @patch("git_fetch_history.services.git_manager.Repo")
    @patch("pathlib.Path.mkdir")
    @patch("pathlib.Path.exists")
    def test_setup_repository_logs_ssh_key(
        self, mock_exists, mock_mkdir, mock_repo_class, caplog
    ):
        mock_exists.return_value = False
        self.git_manager.credentials = self.credentials.model_copy(
            update={"key_path": "/keys/id_rsa"}
        )

        with caplog.at_level("INFO", logger="git_fetch_history.services.git_manager"):
            self.git_manager.setup_repository()

        assert "Authenticating with SSH key /keys/id_rsa" in caplog.text

    @patch("git_fetch_history.services.git_manager.Repo")
    @patch("pathlib.Path.mkdir")
    @patch("pathlib.Path.exists")
    def test_setup_repository_authentication_error(
        self, mock_exists, mock_mkdir, mock_repo_class
    ):
        """Clone failures surface as TransportError."""
        mock_exists.return_value = False
        mock_repo_class.clone_from.side_effect = GitCommandError(
            "git clone", 128, "Permission denied (publickey)"
        )

        with pytest.raises(TransportError, match="Failed to clone"):
            self.git_manager.setup_repository()

        assert self.git_manager.repo is None

    def test_operations_require_repository(self):
        with pytest.raises(RuntimeError, match="Repository not initialized"):
            self.git_manager.pull()
        with pytest.raises(RuntimeError, match="Repository not initialized"):
            self.git_manager.resolve_head()

    def _repo_with_head(self, hexsha):
        mock_repo = MagicMock()
        mock_repo.head.commit = Mock(hexsha=hexsha)
        self.git_manager.repo = mock_repo
        return mock_repo

    def test_pull_up_to_date(self):
        mock_repo = self._repo_with_head("abc123")

        result = self.git_manager.pull()

        assert result.up_to_date is True
        assert result.head == "abc123"
        mock_repo.remotes.origin.pull.assert_called_once_with("main")
        mock_repo.git.custom_environment.assert_called_once_with(
            GIT_SSH_COMMAND="ssh -i key"
        )

    def test_pull_new_head(self):
        mock_repo = self._repo_with_head("abc123")

        def advance(branch):
            mock_repo.head.commit = Mock(hexsha="def456")

        mock_repo.remotes.origin.pull.side_effect = advance

        result = self.git_manager.pull()

        assert result.up_to_date is False
        assert result.head == "def456"

    def test_pull_failure(self):
        mock_repo = self._repo_with_head("abc123")
        mock_repo.remotes.origin.pull.side_effect = GitCommandError(
            "git pull", 1, "Could not resolve host"
        )

        with pytest.raises(TransportError, match="Failed to pull main"):
            self.git_manager.pull()

    def test_resolve_head(self):
        self._repo_with_head("abc123")

        assert self.git_manager.resolve_head() == "abc123"

    def test_iter_log(self):
        mock_repo = self._repo_with_head("c2")
        parent = Mock(hexsha="c1")
        mock_repo.iter_commits.return_value = [
            Mock(
                hexsha="c2",
                author=Mock(email="dev@example.com"),
                authored_date=1700000000,
                message="second\n",
                parents=[parent],
            ),
        ]

        commits = list(self.git_manager.iter_log("c2"))

        mock_repo.iter_commits.assert_called_once_with("c2")
        assert commits[0].hexsha == "c2"
        assert commits[0].parents == ["c1"]
        assert commits[0].author_email == "dev@example.com"

    def test_is_ancestor(self):
        mock_repo = self._repo_with_head("c2")
        mock_repo.is_ancestor.return_value = False

        assert self.git_manager.is_ancestor("c1", "c2") is False
        mock_repo.is_ancestor.assert_called_once_with("c1", "c2")

    def test_diff_builds_file_patches(self):
        mock_repo = self._repo_with_head("c2")
        modified = Mock(
            a_path="a.txt",
            b_path="a.txt",
            new_file=False,
            deleted_file=False,
            diff=b"@@ -1 +1,2 @@\n a\n+b\n",
        )
        deleted = Mock(
            a_path="b.txt",
            b_path="b.txt",
            new_file=False,
            deleted_file=True,
            diff=b"@@ -1 +0,0 @@\n-x\n",
        )
        created = Mock(
            a_path="c.txt",
            b_path="c.txt",
            new_file=True,
            deleted_file=False,
            diff=b"@@ -0,0 +1 @@\n+y\n",
        )
        mock_repo.commit.return_value.diff.return_value = [modified, deleted, created]

        patches = self.git_manager.diff("c1", "c2")

        assert [(p.from_path, p.to_path) for p in patches] == [
            ("a.txt", "a.txt"),
            ("b.txt", None),
            (None, "c.txt"),
        ]
        assert [c.type for c in patches[0].chunks] == [ChunkType.UNCHANGED, ChunkType.ADDED]
        mock_repo.commit.return_value.diff.assert_called_once_with(
            mock_repo.commit.return_value, create_patch=True, no_renames=True
        )

    def test_list_files_yields_blobs_only(self):
        mock_repo = self._repo_with_head("c1")
        blob = Mock(type="blob", path="dir/a.txt")
        blob.data_stream.read.return_value = b"x\n"
        subtree = Mock(type="tree", path="dir")
        submodule = Mock(type="submodule", path="vendor/lib")
        mock_repo.commit.return_value.tree.traverse.return_value = [subtree, blob, submodule]

        files = list(self.git_manager.list_files("c1"))

        assert [(f.path, f.data) for f in files] == [("dir/a.txt", b"x\n")]
        mock_repo.commit.return_value.tree.traverse.assert_called_once_with(branch_first=False)


class TestToCommitInfo:
    def test_root_commit(self):
        commit = Mock(
            hexsha="abc",
            author=Mock(email="dev@example.com"),
            authored_date=1640995200,
            message="Initial commit",
            parents=(),
        )

        info = to_commit_info(commit)

        assert info.is_root
        assert info.authored_date == 1640995200
        assert info.message == "Initial commit"
