"""
Tests for flowtest.runner.WorkflowRunner
"""
import subprocess
import unittest
from unittest.mock import MagicMock

from flowtest.exit_codes import StepFailedError, GIT_ERROR
from flowtest.git import GitRepository
from flowtest.models import FlowSettings, Step
from flowtest.runner import WorkflowRunner


def make_flow(actions, dry_run=False):
    flow = MagicMock()
    flow.settings = FlowSettings(dry_run=dry_run)
    flow.repo = GitRepository("/work/flowtest", dry_run=dry_run)
    flow.steps.return_value = [
        Step(number, f"step-{number}", f"Step number {number}", action)
        for number, action in enumerate(actions, 1)
    ]
    return flow


class TestWorkflowRunner(unittest.TestCase):

    def test_runs_steps_in_order(self):
        calls = []
        flow = make_flow([lambda i=i: calls.append(i) for i in range(3)])
        results = WorkflowRunner(flow).run_all()
        self.assertEqual(calls, [0, 1, 2])
        self.assertEqual([r["step"] for r in results], [1, 2, 3])
        self.assertTrue(all(r["status"] == "ok" for r in results))

    def test_result_lists_commands_of_its_step_only(self):
        flow = make_flow([])
        repo = flow.repo
        repo.history.append("git init")

        def second():
            repo.history.append("git add README.md")
            repo.history.append("git commit -am 'add README'")
            return {"tag": "v1"}

        flow.steps.return_value = [
            Step(1, "first", "First", lambda: None),
            Step(2, "second", "Second", second),
        ]
        results = WorkflowRunner(flow).run_all()
        self.assertEqual(results[0]["commands"], [])
        self.assertEqual(results[1]["commands"], ["git add README.md", "git commit -am 'add README'"])
        self.assertEqual(results[1]["details"], {"tag": "v1"})
        self.assertNotIn("details", results[0])

    def test_failure_stops_the_run(self):
        third = MagicMock()

        def failing():
            raise subprocess.CalledProcessError(1, "git push origin HEAD", stderr="rejected\n")

        flow = make_flow([lambda: None, failing, third])
        runner = WorkflowRunner(flow)

        with self.assertRaises(StepFailedError) as ctx:
            runner.run_all()

        error = ctx.exception
        self.assertEqual(error.step_number, 2)
        self.assertEqual(error.step_name, "step-2")
        self.assertEqual(error.command, "git push origin HEAD")
        self.assertEqual(error.returncode, 1)
        self.assertEqual(error.stderr, "rejected")
        self.assertEqual(error.exit_code, GIT_ERROR)
        third.assert_not_called()
        self.assertEqual(len(runner.completed), 1)

    def test_missing_executable_is_a_step_failure(self):
        def no_git():
            raise FileNotFoundError("git")

        with self.assertRaises(StepFailedError):
            WorkflowRunner(make_flow([no_git])).run_all()

    def test_dry_run_status(self):
        results = WorkflowRunner(make_flow([lambda: None], dry_run=True)).run_all()
        self.assertEqual(results[0]["status"], "dry_run")

    def test_progress_is_reported(self):
        progress = MagicMock()
        WorkflowRunner(make_flow([lambda: None]), progress=progress).run_all()
        progress.assert_called_once_with("Step 1/1: step-1")
