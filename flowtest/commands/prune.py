"""
Handles the 'prune' command for an existing repository.
"""

import os

import click

from ..config import load_config, configure_logging
from ..exit_codes import NotARepositoryError
from ..flow import prune_branches
from ..git import GitRepository
from ..utils import is_git_repo
from ..cli_utils import standard_command, add_common_options


def open_repository(directory, config, dry_run=False):
    """
    GitRepository for ``directory`` (default: the configured workspace).

    Raises:
        NotARepositoryError: the directory is not a git working tree.
    """
    general = config.get("general", {})
    path = os.path.abspath(os.path.expanduser(directory or general.get("workspace", "flowtest")))
    if not is_git_repo(path):
        raise NotARepositoryError(f"{path} is not a git repository")
    return GitRepository(path, remote=general.get("remote", "origin"), dry_run=dry_run)


@click.command("prune")
@add_common_options('dir', 'dry_run', 'verbose', 'quiet')
@standard_command()
def prune_handler(directory, dry_run, verbose, progress, **kwargs):
    """
    Delete local branches whose remote branch is gone.

    Fetches with --prune, then compares each local branch's upstream with
    the branches the remote still has.
    """
    config = load_config()
    configure_logging(config, verbose)
    repo = open_repository(directory, config, dry_run)
    progress(f"Pruning branches in {repo.path}")
    result = prune_branches(repo)
    result["path"] = str(repo.path)
    return result
