"""
Git helpers for the review run.

Runs git as a blocking subprocess in the checked-out workspace and
produces the unified diff each review batch is built from.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_GIT_TIMEOUT = 120
DIFF_CONTEXT_LINES = 3

BOT_EMAIL = "github-actions[bot]@users.noreply.github.com"
BOT_NAME = "github-actions[bot]"


class DiffError(Exception):
    """A git command needed for the review failed."""


def decode_output(data: Optional[bytes]) -> str:
    """Decode captured process output; undecodable bytes become U+FFFD, newlines are kept as-is."""
    return (data or b"").decode("utf-8", errors="replace")


def git_output(args: List[str], cwd: Path, timeout: int = DEFAULT_GIT_TIMEOUT) -> str:
    """
    Run ``git -C <cwd> <args>`` and return its stdout.

    Output is captured as bytes so changed files in legacy encodings and
    CRLF line endings come back intact.

    Raises:
        DiffError: if git cannot start, times out, or exits non-zero
    """
    label = " ".join(args[:3])
    try:
        proc = subprocess.run(["git", "-C", str(cwd), *args], capture_output=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise DiffError(f"git {label} timed out after {timeout}s")
    except OSError as exc:
        raise DiffError(f"Could not run git: {exc}") from exc

    if proc.returncode != 0:
        stderr = decode_output(proc.stderr).strip()
        raise DiffError(f"git {label} failed (exit {proc.returncode}): {stderr}")
    return decode_output(proc.stdout)


def diff_range(base_ref: str, remote: str = "origin") -> str:
    """``<remote>/<base>...HEAD`` (or ``<base>...HEAD`` without a remote)."""
    base = f"{remote}/{base_ref}" if remote else base_ref
    return f"{base}...HEAD"


class GitDiffProvider:
    """Unified diffs for a file set against the PR base."""

    def __init__(self, workspace: Path, remote: str = "origin", timeout: int = DEFAULT_GIT_TIMEOUT):
        self.workspace = Path(workspace)
        self.remote = remote
        self.timeout = timeout

    def diff_for(self, filenames: Sequence[str], base_ref: str) -> str:
        """
        Return ``git diff -U3 <base>...HEAD -- <files>`` stdout verbatim.

        An empty file list yields an empty diff without running git; a bare
        ``--`` would otherwise widen the diff to the whole PR.

        Raises:
            DiffError: on a missing base ref, non-zero exit, or timeout
        """
        if not filenames:
            return ""
        if not base_ref:
            raise DiffError("No base ref to diff against")

        args = ["diff", f"-U{DIFF_CONTEXT_LINES}", diff_range(base_ref, self.remote), "--", *filenames]
        try:
            diff_text = git_output(args, self.workspace, timeout=self.timeout)
        except DiffError as exc:
            raise DiffError(f"Diff of {len(filenames)} file(s) failed: {exc}") from exc

        logger.info(f"Generated diff for {len(filenames)} file(s) ({len(diff_text)} chars)")
        return diff_text


def configure_git(workspace: Path, timeout: int = DEFAULT_GIT_TIMEOUT) -> None:
    """
    Trust the workspace and set the bot identity globally.

    Raises:
        DiffError: if any setup command fails
    """
    logger.info("Setting up Git configuration...")
    commands = [
        ["config", "--global", "--add", "safe.directory", str(Path(workspace).resolve())],
        ["config", "--global", "user.email", BOT_EMAIL],
        ["config", "--global", "user.name", BOT_NAME],
    ]
    for args in commands:
        git_output(args, Path(workspace), timeout=timeout)
    logger.info("Git configuration completed successfully")
