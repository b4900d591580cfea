"""
The GitHub-like flow, step by step.

* master is always potentially shippable and shall always be clean
* work is always done within branches, synced from and merged to master
* branches are merged to master without fast-forward so the merge stays
  visible in history
* tracked branches are synced from master with a merge, untracked
  branches with a rebase
* a merged branch that will not be reused is deleted (locally and on the
  remote) and replaced by an annotated tag of the same name; the tag is
  created only after the branch is gone

Commands reference:

    git pull --no-edit --no-rebase origin master -p
        same as: git fetch -p origin && git merge -m "merge master to BRANCH" master
    git pull --no-edit --rebase origin master -p
        same as: git fetch -p origin && git rebase master

Merging to master should really be approved by somebody not involved in
the branch; pull requests are the right tool for that. This flow merges
directly.
"""
from pathlib import Path
from typing import Dict, List, Optional

from .config import logger
from .exit_codes import WorkspaceExistsError
from .git import GitRepository
from .models import Branch, FlowSettings, Step, SyncPolicy
from .utils import find_gone_branches

README_LINES = [
    "Script simulating a git workflow to 1/ validate commands and options to use "
    "and 2/ be a reference of commands and options to use.",
    "This repo hosts both the script ({script}) and the history it generates.",
    "The simulated flow is similar to GitHub one: master is always potentially "
    "shippable, all work is done in branches, etc. See GitHub flow for more details.",
    "See {script} for more details.",
]

ECHO_SCRIPT = "add_echo_script"
COLLABORATORS = "add_collaborators"
LICENSE = "add_license"
COPYRIGHT = "add_copyright"


class GitHubFlow:
    """
    Runs the flow against one workspace.

    Branch objects are created by the steps that start them and looked up
    by later steps, so the tracked/untracked state is carried explicitly
    instead of being implied by earlier pushes.
    """

    def __init__(self, settings: FlowSettings, repo: Optional[GitRepository] = None):
        self.settings = settings
        self.repo = repo or GitRepository(
            settings.workspace, remote=settings.remote, dry_run=settings.dry_run
        )
        self.branches: Dict[str, Branch] = {}
        self.tags: List[str] = []

    # Branch lifecycle

    def start_branch(self, name: str, policy: SyncPolicy) -> Branch:
        """Create a branch off trunk; tracked branches are pushed right away."""
        branch = Branch(name, policy)
        self.repo.create_branch(name, self.settings.trunk)
        if branch.tracked:
            self.repo.push_upstream(name)
        self.branches[name] = branch
        return branch

    def track(self, branch: Branch):
        """Publish a local branch; from now on it is synced with merges."""
        self.repo.push_upstream("HEAD")
        branch.mark_tracked()

    def sync_from_trunk(self, branch: Branch):
        self.repo.pull(self.settings.trunk, rebase=branch.policy.rebase)

    def finish_branch(self, branch: Branch):
        """
        Merge to trunk with --no-ff, then replace the branch with a tag.

        The branch is deleted locally and remotely before the tag is made;
        the reverse order fails on the name collision.
        """
        trunk = self.settings.trunk
        self.repo.checkout(trunk)
        self.repo.merge_no_ff(branch.name, f"merge {branch.name} to {trunk}")
        self.repo.push_head()
        self.repo.delete_branch(branch.name)
        if branch.tracked:
            self.repo.delete_remote_branch(branch.name)
        self.repo.tag_annotated(branch.name, f"tagging to {branch.name}")
        self.repo.push_tag(branch.name)
        self.branches.pop(branch.name, None)
        self.tags.append(branch.name)

    def branch(self, name: str) -> Branch:
        return self.branches[name]

    # Steps

    def create_repository(self):
        settings = self.settings
        workspace = Path(settings.workspace)
        if workspace.exists():
            raise WorkspaceExistsError(f"Workspace {workspace} already exists")
        if settings.dry_run:
            logger.info(f"[Dry Run] Would create {workspace}")
        else:
            workspace.mkdir(parents=True)
            (workspace / settings.script_name).write_text(
                Path(__file__).read_text(encoding="utf-8"), encoding="utf-8"
            )

        repo = self.repo
        repo.init(settings.trunk)
        repo.configure_identity(settings.author_name, settings.author_email)
        repo.add_remote(settings.repository_url)
        repo.write_file("README.md", [line.format(script=settings.script_name) for line in README_LINES])
        repo.add("README.md", settings.script_name)
        repo.commit_all(f"add README and {settings.script_name}")
        repo.push_upstream(settings.trunk)

        tag = f"generated_with_git_{repo.version()}"
        repo.tag_annotated(tag, "tagging with git version used")
        repo.push_tag(tag)
        self.tags.append(tag)
        return {"tag": tag}

    def start_echo_script(self):
        self.start_branch(ECHO_SCRIPT, SyncPolicy.TRACKED)
        self.repo.write_file("hello.sh", ["#!/bin/bash", "echo hello world"])
        self.repo.make_executable("hello.sh")
        self.repo.add("hello.sh")
        self.repo.commit_all("add hello world script")
        self.repo.push_head()

    def start_collaborators(self):
        self.start_branch(COLLABORATORS, SyncPolicy.UNTRACKED)
        self.repo.write_file("COLLABORATORS", ["legdba"])
        self.repo.add("COLLABORATORS")
        self.repo.commit_all("add collaborator: legdba")

    def add_license(self):
        branch = self.start_branch(LICENSE, SyncPolicy.TRACKED)
        self.repo.write_file("LICENSE", ["do whatever you want with this repo, it is for testing ;)"], append=True)
        self.repo.add("LICENSE")
        self.repo.commit_all("add license")
        self.repo.push_head()
        self.finish_branch(branch)

    def hack_echo_script(self):
        branch = self.branch(ECHO_SCRIPT)
        self.repo.checkout(branch.name)
        self.repo.write_file("hello.sh", ["#!/bin/bash", "echo hello $@"])
        self.repo.commit_all("improved hello by echoing input params")
        self.repo.push_head()
        self.sync_from_trunk(branch)

    def add_copyright(self):
        branch = self.start_branch(COPYRIGHT, SyncPolicy.TRACKED)
        self.repo.write_file("COPYRIGHT", ["Copyright legdba 2014"], append=True)
        self.repo.add("COPYRIGHT")
        self.repo.commit_all("add copyright")
        self.repo.push_head()
        self.finish_branch(branch)

    def finish_collaborators(self):
        branch = self.branch(COLLABORATORS)
        self.repo.checkout(branch.name)
        self.repo.write_file("COLLABORATORS", ["vbo"], append=True)
        self.repo.commit_all("add collaborator: vbo")
        # Still untracked here, so this rebases
        self.sync_from_trunk(branch)
        self.track(branch)
        self.finish_branch(branch)

    def finish_echo_script(self):
        branch = self.branch(ECHO_SCRIPT)
        self.repo.checkout(branch.name)
        self.repo.write_file("hello.sh", ["#!/bin/bash", "# echo hello and the input params", "echo hello $@"])
        self.repo.commit_all("added comment to clarify this complex script ;)")
        self.repo.push_head()
        self.sync_from_trunk(branch)
        self.repo.push_head()
        self.finish_branch(branch)

    def prune(self):
        return prune_branches(self.repo)

    def show_log(self):
        return {"output": self.repo.log_graph()}

    def steps(self) -> List[Step]:
        """The fixed step catalog, in execution order."""
        return [
            Step(1, "init", "Create repo, attach to origin, set README and add this script",
                 self.create_repository),
            Step(2, "start-echo-script",
                 "Add a hello script within a tracked branch, don't merge yet, commit intermediate work",
                 self.start_echo_script),
            Step(3, "start-collaborators",
                 "Add a COLLABORATORS list within an untracked branch, locally commit intermediate work",
                 self.start_collaborators),
            Step(4, "add-license", "Add a license within a branch, commit and merge",
                 self.add_license),
            Step(5, "hack-echo-script",
                 "Get back to add_echo_script branch, hack, merge from master, commit intermediate work",
                 self.hack_echo_script),
            Step(6, "add-copyright", "Add a COPYRIGHT within a branch, commit and merge",
                 self.add_copyright),
            Step(7, "finish-collaborators",
                 "Add another COLLABORATORS within an untracked branch, rebase from master, track, merge",
                 self.finish_collaborators),
            Step(8, "finish-echo-script",
                 "Get back to add_echo_script branch, hack more code, merge from master, merge to master",
                 self.finish_echo_script),
            Step(9, "prune", "Locally remove merged and remotely deleted branches",
                 self.prune),
            Step(10, "log", "Display the resulting history; hopefully it should be clean",
                 self.show_log),
        ]


def prune_branches(repo: GitRepository):
    """
    Delete local branches whose upstream branch was removed from the remote.

    Returns:
        dict: {"pruned": [branch names]}
    """
    repo.fetch_prune()
    gone = find_gone_branches(repo.upstreams(), repo.remote_branches(), repo.remote)
    for name in gone:
        logger.info(f"Pruning {name}: its upstream is gone")
        repo.delete_branch(name)
    return {"pruned": gone}
