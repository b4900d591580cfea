"""
Thin wrapper around the git executable, bound to one working tree.

Each method issues the git command(s) for one operation of the flow.
Nothing here inspects or interprets history; failures surface as
subprocess.CalledProcessError from run_command.
"""
import os
import stat
from pathlib import Path
from typing import Iterable, List, Optional

from .config import logger
from .exit_codes import NameCollisionError
from .utils import (
    run_command, format_command, list_local_branches, list_remote_branches,
    list_upstreams, parse_git_version,
)


class GitRepository:
    """A local working tree and the remote it is attached to."""

    def __init__(self, path, remote: str = "origin", dry_run: bool = False):
        self.path = Path(path)
        self.remote = remote
        self.dry_run = dry_run
        self.history: List[str] = []

    def git(self, *args, capture_output: bool = False) -> Optional[str]:
        command = ["git", *args]
        self.history.append(format_command(command))
        return run_command(
            command,
            cwd=str(self.path),
            dry_run=self.dry_run,
            capture_output=capture_output,
        )

    # Working tree files

    def write_file(self, name: str, lines: Iterable[str], append: bool = False):
        """Write (or append) lines to a working tree file, one per line."""
        target = self.path / name
        text = "".join(f"{line}\n" for line in lines)
        if self.dry_run:
            logger.info(f"[Dry Run] Would {'append to' if append else 'write'} {target}")
            return
        with open(target, "a" if append else "w", encoding="utf-8") as f:
            f.write(text)
        logger.debug(f"{'Appended to' if append else 'Wrote'} {target}")

    def make_executable(self, name: str):
        """chmod a+x"""
        target = self.path / name
        if self.dry_run:
            logger.info(f"[Dry Run] Would chmod a+x {target}")
            return
        mode = os.stat(target).st_mode
        os.chmod(target, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    # Repository setup

    def init(self, trunk: str = "master"):
        self.git("init")
        # Independent of the init.defaultBranch setting
        self.git("symbolic-ref", "HEAD", f"refs/heads/{trunk}")

    def configure_identity(self, name: str, email: str):
        self.git("config", "user.name", name)
        self.git("config", "user.email", email)

    def add_remote(self, url: str):
        self.git("remote", "add", self.remote, url)

    def version(self) -> str:
        """Version of the git executable, e.g. '2.43.0'."""
        output = self.git("--version", capture_output=True)
        if self.dry_run:
            return "dry_run"
        return parse_git_version(output)

    # Everyday operations

    def add(self, *paths: str):
        self.git("add", *paths)

    def commit_all(self, message: str):
        self.git("commit", "-am", message)

    def create_branch(self, name: str, start_point: str):
        self.git("checkout", "-b", name, start_point)

    def checkout(self, name: str):
        self.git("checkout", name)

    def push_upstream(self, ref: str = "HEAD"):
        """Push and record the remote branch as upstream."""
        self.git("push", "-u", self.remote, ref)

    def push_head(self):
        self.git("push", self.remote, "HEAD")

    def merge_no_ff(self, branch: str, message: str):
        self.git("merge", "--no-ff", "-m", message, branch)

    def pull(self, branch: str, rebase: bool = False):
        """
        Bring ``branch`` from the remote into the current branch.

        rebase=False merges (for shared branches), rebase=True replays the
        local commits on top (for branches nobody else has seen).
        """
        mode = "--rebase" if rebase else "--no-rebase"
        self.git("pull", "--no-edit", mode, "-p", self.remote, branch)

    def fetch_prune(self):
        self.git("fetch", "-p", self.remote)

    # Branch retirement

    def delete_branch(self, name: str):
        self.git("branch", "-d", name)

    def delete_remote_branch(self, name: str):
        self.git("push", "--delete", self.remote, f"refs/heads/{name}")

    def tag_annotated(self, name: str, message: str):
        """
        Create an annotated tag.

        Raises:
            NameCollisionError: a branch with the same name still exists,
                locally or on the remote.
        """
        if not self.dry_run:
            if name in self.local_branches():
                raise NameCollisionError(
                    f"Cannot tag '{name}': a branch with that name still exists; delete it first"
                )
            if f"{self.remote}/{name}" in self.remote_branches():
                raise NameCollisionError(
                    f"Cannot tag '{name}': {self.remote} still has a branch with that name; delete it first"
                )
        self.git("tag", "-a", name, "-m", message)

    def push_tag(self, name: str):
        self.git("push", self.remote, f"refs/tags/{name}")

    # Queries

    def local_branches(self) -> List[str]:
        if self.dry_run:
            return []
        return list_local_branches(str(self.path))

    def remote_branches(self) -> List[str]:
        if self.dry_run:
            return []
        return list_remote_branches(str(self.path), self.remote)

    def upstreams(self):
        if self.dry_run:
            return {}
        return list_upstreams(str(self.path))

    def log_graph(self) -> str:
        """The decorated graph of every ref."""
        output = self.git(
            "log", "--graph", "--abbrev-commit", "--decorate", "--date=relative",
            "--format=format:%C(bold blue)%h%C(reset) - %C(bold green)(%ar)%C(reset) "
            "%C(white)%s%C(reset) %C(dim white)- %an%C(reset)%C(bold yellow)%d%C(reset)",
            "--all",
            capture_output=True,
        )
        return output or ""
