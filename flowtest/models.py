"""
Data types shared by the workflow runner and the step catalog.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Any, Optional

from .config import DEFAULT_REPOSITORY_URL


class SyncPolicy(Enum):
    """How a branch picks up new trunk commits."""
    TRACKED = "merge"      # shared history, never rewritten
    UNTRACKED = "rebase"   # local only, safe to rewrite

    @property
    def rebase(self) -> bool:
        return self is SyncPolicy.UNTRACKED


@dataclass
class Branch:
    """A work branch and its sync policy."""
    name: str
    policy: SyncPolicy = SyncPolicy.UNTRACKED

    @property
    def tracked(self) -> bool:
        return self.policy is SyncPolicy.TRACKED

    def mark_tracked(self):
        self.policy = SyncPolicy.TRACKED


@dataclass
class FlowSettings:
    """Parameters threaded through every step."""
    repository_url: str = DEFAULT_REPOSITORY_URL
    workspace: Path = Path("flowtest")
    trunk: str = "master"
    remote: str = "origin"
    author_name: str = "flowtest"
    author_email: str = "flowtest@example.com"
    script_name: str = "flowtest.py"
    dry_run: bool = False

    @classmethod
    def from_config(cls, config: Dict[str, Any], **overrides) -> "FlowSettings":
        """Build settings from a loaded config; non-None overrides win."""
        general = config.get("general", {})
        git = config.get("git", {})
        values = {
            "repository_url": general.get("repository_url", DEFAULT_REPOSITORY_URL),
            "workspace": Path(general.get("workspace", "flowtest")),
            "trunk": general.get("trunk", "master"),
            "remote": general.get("remote", "origin"),
            "author_name": git.get("author_name", "flowtest"),
            "author_email": git.get("author_email", "flowtest@example.com"),
            "script_name": git.get("script_name", "flowtest.py"),
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = Path(value) if key == "workspace" else value
        return cls(**values)


@dataclass
class Step:
    """One entry of the step catalog."""
    number: int
    name: str
    title: str
    action: Callable[..., Optional[Dict[str, Any]]] = field(repr=False)
