"""
Git Staging Adapter

Thin wrapper around the git command line used by the sync workflows:
- status() reads `git status --porcelain=v1 -z`
- stage() runs `git add [-u] -- <path>`
- delete_and_stage() removes a generated directory and makes sure git
  records the removed files, not just the ones that come back

Generated trees (unpacked JSON, exports) are deleted and recreated on every
sync. A plain delete is not always picked up by a later `git add <dir>`, so
deletions under the directory are staged explicitly with `git add -u`.
"""

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from gitsketch.contexts.versioning.logger import _log_debug, _log_error, _log_info
from gitsketch.exceptions import StagingError

UNMODIFIED = " "
# Porcelain codes whose entry is followed by the original path token
RENAME_CODES = ("R", "C")


@dataclass(frozen=True)
class FileStatus:
    """
    One entry of `git status --porcelain`.

    Attributes:
        path: Absolute path of the file
        index_state: X code (staged state)
        worktree_state: Y code (working tree state)
        original_path: Source path for renames and copies
    """

    path: Path
    index_state: str
    worktree_state: str
    original_path: Optional[Path] = None

    @property
    def is_changed_in_worktree(self) -> bool:
        return self.worktree_state != UNMODIFIED


def parse_porcelain(raw: str, root: Path) -> List[FileStatus]:
    """
    Parse NUL-separated porcelain v1 output.

    Args:
        raw: stdout of `git status --porcelain=v1 -z`
        root: Repository top level; porcelain paths are relative to it

    Returns:
        List of FileStatus entries in git's order
    """
    entries: List[FileStatus] = []
    tokens = [t for t in raw.split("\0") if t]
    idx = 0

    while idx < len(tokens):
        token = tokens[idx]
        idx += 1

        if len(token) < 4:
            continue

        x_code, y_code, path_part = token[0], token[1], token[3:]

        original = None
        if (x_code in RENAME_CODES or y_code in RENAME_CODES) and idx < len(tokens):
            original = root / tokens[idx]
            idx += 1

        entries.append(
            FileStatus(
                path=root / path_part,
                index_state=x_code,
                worktree_state=y_code,
                original_path=original,
            )
        )

    return entries


def _is_under(path: Path, directory: Path) -> bool:
    return path == directory or directory in path.parents


class GitRepository:
    """
    Git operations scoped to one working tree.

    Args:
        root: Any directory inside the working tree
        git_executable: git binary to invoke (default: "git" from PATH)
    """

    def __init__(self, root: Path, git_executable: str = "git"):
        self.root = Path(root).resolve()
        self.git_executable = git_executable
        self._toplevel: Optional[Path] = None

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        cmd = [self.git_executable, "-C", str(self.root), *args]
        _log_debug(f"Running: {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8")

        if result.returncode != 0:
            _log_error(f"git {args[0]} exited with status {result.returncode}")
            raise StagingError(
                f"git {args[0]} failed",
                command=cmd,
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result

    @property
    def toplevel(self) -> Path:
        """Top-level directory of the working tree (porcelain paths are relative to it)."""
        if self._toplevel is None:
            output = self._run(["rev-parse", "--show-toplevel"]).stdout.strip()
            self._toplevel = Path(output).resolve()
        return self._toplevel

    def status(self) -> List[FileStatus]:
        """Return the working tree status, one entry per changed path."""
        result = self._run(["status", "--porcelain=v1", "-z"])
        return parse_porcelain(result.stdout, self.toplevel)

    def stage(self, path: Path, include_deletions: bool = False) -> None:
        """
        Stage path for the next commit.

        Args:
            path: File or directory to stage
            include_deletions: Use `git add -u`, which also records tracked
                files that no longer exist (and ignores untracked ones)

        Raises:
            StagingError: If git rejects the command
        """
        path = Path(path).resolve()
        if not include_deletions and not path.exists():
            _log_debug(f"Nothing to stage at {path}")
            return

        args = ["add"]
        if include_deletions:
            args.append("-u")
        args += ["--", str(path)]

        _log_debug(f"Staging {path}")
        self._run(args)

    def delete_and_stage(self, path: Path) -> bool:
        """
        Recursively delete a directory and stage the deletions git reports under it.

        Args:
            path: Generated directory to remove

        Returns:
            True if deletions were staged, False if nothing needed staging
            (including when path did not exist)
        """
        path = Path(path).resolve()
        if not path.exists():
            _log_debug(f"Nothing to delete at {path}")
            return False

        _log_info(f"Deleting {path}")
        shutil.rmtree(path)

        changed = [
            entry
            for entry in self.status()
            if _is_under(entry.path.resolve(), path) and entry.is_changed_in_worktree
        ]
        if not changed:
            _log_debug(f"No tracked changes under {path}")
            return False

        for entry in changed:
            _log_debug(f"Deleted path change: {entry.path} ({entry.worktree_state})")

        self.stage(path, include_deletions=True)
        return True
