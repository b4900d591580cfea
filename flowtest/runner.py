"""
Sequential execution of the step catalog.

The runner is fail-fast: the first git command that fails stops the run.
There is no retry and no rollback; the repository is left as the last
successful command made it.
"""
import subprocess
import time
from typing import Any, Dict, Generator, List, Optional

from .config import logger
from .exit_codes import StepFailedError
from .flow import GitHubFlow
from .models import Step


class WorkflowRunner:
    """Execute a flow's steps strictly in order."""

    def __init__(self, flow: GitHubFlow, progress=None):
        self.flow = flow
        self.progress = progress
        self.completed: List[Dict[str, Any]] = []

    def _announce(self, step: Step, total: int):
        logger.info(f">>>> [{step.number}/{total}] {step.title}")
        if self.progress:
            self.progress(f"Step {step.number}/{total}: {step.name}")

    def run_step(self, step: Step) -> Dict[str, Any]:
        """
        Run one step and describe what it did.

        Raises:
            StepFailedError: a git command of this step failed.
        """
        history = self.flow.repo.history
        first_command = len(history)
        started = time.monotonic()
        try:
            details: Optional[Dict[str, Any]] = step.action()
        except subprocess.CalledProcessError as e:
            raise StepFailedError(
                step.number, step.name, e.cmd, returncode=e.returncode, stderr=e.stderr
            ) from e
        except OSError as e:
            raise StepFailedError(step.number, step.name, str(e)) from e

        result = {
            "step": step.number,
            "name": step.name,
            "title": step.title,
            "status": "dry_run" if self.flow.settings.dry_run else "ok",
            "commands": list(history[first_command:]),
            "duration": round(time.monotonic() - started, 3),
        }
        if details:
            result["details"] = details
        return result

    def run(self) -> Generator[Dict[str, Any], None, None]:
        """Yield one result per step; stop at the first failure."""
        steps = self.flow.steps()
        for step in steps:
            self._announce(step, len(steps))
            result = self.run_step(step)
            self.completed.append(result)
            yield result

    def run_all(self) -> List[Dict[str, Any]]:
        return list(self.run())
