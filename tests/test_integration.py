"""
End-to-end runs of the whole flow against a local bare repository.
"""
import re
import shutil
import subprocess
from pathlib import Path

import pytest

from flowtest.flow import GitHubFlow
from flowtest.models import FlowSettings
from flowtest.runner import WorkflowRunner

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def git(cwd, *args):
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
    return result.stdout.strip()


def run_flow(workspace, remote):
    settings = FlowSettings(repository_url=str(remote), workspace=workspace)
    runner = WorkflowRunner(GitHubFlow(settings))
    return runner.run_all()


def graph_shape(workspace):
    """
    Commits as (subject, parent subjects).

    Pull merges name the remote the way git shortens it (a bare
    repository loses its .git suffix), so that part is blanked out.
    """
    lines = git(workspace, "log", "--all", "--format=%H%x09%P%x09%s").splitlines()
    subjects = {}
    parents = {}
    for line in lines:
        sha, parent_shas, subject = line.split("\t", 2)
        subjects[sha] = re.sub(r" of .+ into ", " of REMOTE into ", subject)
        parents[sha] = parent_shas.split()
    return sorted(
        (subjects[sha], tuple(subjects[p] for p in parents[sha]))
        for sha in subjects
    )


@pytest.fixture
def finished(tmp_path, bare_remote):
    workspace = tmp_path / "flowtest"
    results = run_flow(workspace, bare_remote)
    return workspace, bare_remote, results


def test_all_steps_succeed(finished):
    _, _, results = finished
    assert [r["step"] for r in results] == list(range(1, 11))
    assert all(r["status"] == "ok" for r in results)
    assert "merge add_echo_script to master" in results[-1]["details"]["output"]


def test_merged_branches_replaced_by_tags(finished):
    workspace, remote, _ = finished
    merged = {"add_license", "add_copyright", "add_collaborators", "add_echo_script"}

    remote_heads = git(remote, "for-each-ref", "--format=%(refname:short)", "refs/heads").split()
    remote_tags = set(git(remote, "for-each-ref", "--format=%(refname:short)", "refs/tags").split())
    local_heads = git(workspace, "for-each-ref", "--format=%(refname:short)", "refs/heads").split()

    assert remote_heads == ["master"]
    assert local_heads == ["master"]
    assert merged <= remote_tags
    assert any(tag.startswith("generated_with_git_") for tag in remote_tags)
    for tag in merged:
        assert git(workspace, "cat-file", "-t", tag) == "tag"


def test_trunk_has_four_no_ff_merges(finished):
    workspace, _, _ = finished
    subjects = git(workspace, "log", "--first-parent", "--merges", "--format=%s", "master").splitlines()
    assert subjects == [
        "merge add_echo_script to master",
        "merge add_collaborators to master",
        "merge add_copyright to master",
        "merge add_license to master",
    ]


def _merge_commit(workspace, branch):
    return git(workspace, "log", "--format=%H", f"--grep=^merge {branch} to master$", "master")


def test_untracked_branch_was_rebased(finished):
    workspace, _, _ = finished
    merge = _merge_commit(workspace, "add_collaborators")
    branch_merges = git(workspace, "rev-list", "--merges", f"{merge}^1..{merge}^2")
    assert branch_merges == ""


def test_tracked_branch_was_merged_from_trunk(finished):
    workspace, _, _ = finished
    merge = _merge_commit(workspace, "add_echo_script")
    branch_merges = git(workspace, "rev-list", "--merges", f"{merge}^1..{merge}^2").splitlines()
    assert len(branch_merges) == 2


def test_final_working_tree(finished):
    workspace, _, _ = finished
    files = {p.name for p in Path(workspace).iterdir() if p.name != ".git"}
    assert files == {"README.md", "flowtest.py", "hello.sh", "LICENSE", "COPYRIGHT", "COLLABORATORS"}
    assert (workspace / "hello.sh").read_text() == (
        "#!/bin/bash\n# echo hello and the input params\necho hello $@\n"
    )
    assert (workspace / "COLLABORATORS").read_text() == "legdba\nvbo\n"
    assert git(workspace, "status", "--porcelain") == ""


def test_two_runs_give_the_same_graph(tmp_path):
    shapes = []
    for name in ("first", "second"):
        remote = tmp_path / f"{name}.git"
        subprocess.run(["git", "init", "--bare", str(remote)], check=True, capture_output=True)
        workspace = tmp_path / name
        run_flow(workspace, remote)
        shapes.append(graph_shape(workspace))
    assert shapes[0] == shapes[1]
