from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from rust_diagnostics.errors import GitError

logger = logging.getLogger(__name__)


def get_git_repo_root(start_dir: Path) -> Path | None:
    result = subprocess.run(
        ["git", "-C", str(start_dir), "rev-parse", "--show-toplevel"],
        check=False,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        return None
    root = result.stdout.strip()
    if not root:
        return None
    return Path(root)


class GitRepository:
    """Thin ``git`` command wrapper implementing the ``Repository`` protocol."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @classmethod
    def discover(cls, start_dir: str | Path) -> GitRepository:
        root = get_git_repo_root(Path(start_dir))
        if root is None:
            raise GitError(f"{start_dir} is not inside a git repository")
        return cls(root)

    def _git(self, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", "-C", str(self.root), *args],
                check=False,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise GitError("git is not installed or not in PATH") from exc
        if result.returncode != 0:
            raise GitError(f"git {' '.join(args)} failed: {result.stderr.strip()}")
        return result.stdout

    def head(self) -> str:
        return self._git("rev-parse", "HEAD").strip()

    def current_ref(self) -> str:
        """The checked-out branch name, or the commit id when HEAD is detached."""
        branch = self._git("branch", "--show-current").strip()
        return branch or self.head()

    def resolve(self, revision: str) -> str:
        return self._git("rev-parse", "--verify", f"{revision}^{{commit}}").strip()

    def diff(self, old: str, new: str) -> str:
        return self._git("diff", "--no-color", "--no-ext-diff", old, new)

    def checkout(self, revision: str) -> None:
        logger.debug("Checking out %s in %s", revision, self.root)
        self._git("checkout", "--force", "--quiet", revision)
