"""
Shared utility functions for flowtest.
"""
import shlex
import subprocess
from pathlib import Path

from .config import logger


def format_command(command):
    """Render a command (string or argument list) the way a shell would show it."""
    if isinstance(command, str):
        return command
    return shlex.join(str(part) for part in command)


def run_command(command, cwd=".", dry_run=False, capture_output=False, check=True, log_stderr=True):
    """
    Runs a command and logs the output.

    Args:
        command (str or list): The command to run. Strings go through the
            shell, lists are executed directly.
        cwd (str): The working directory.
        dry_run (bool): If True, log the command without executing.
        capture_output (bool): If True, return stdout.
        check (bool): If True, raise CalledProcessError on non-zero exit codes.
        log_stderr (bool): If False, do not log stderr as an error.

    Returns:
        str: The command's stdout if capture_output is True, otherwise None.
    """
    display = format_command(command)
    if dry_run:
        logger.info(f"[Dry Run] Would run command in '{cwd}': {display}")
        return "Dry run output" if capture_output else None

    logger.debug(f"Running command in '{cwd}': {display}")
    result = subprocess.run(
        command,
        shell=isinstance(command, str),
        capture_output=True,
        text=True,
        cwd=cwd,
        check=False,  # Disable check here to handle output manually
        encoding='utf-8'
    )

    if result.stdout and result.stdout.strip():
        logger.debug(result.stdout.strip())

    # Log stderr only if the command failed
    if result.returncode != 0:
        if log_stderr:
            logger.error(f"Command failed with exit code {result.returncode}: {display}")
            if result.stderr and result.stderr.strip():
                logger.error(result.stderr.strip())
        if check:
            raise subprocess.CalledProcessError(
                result.returncode, display, output=result.stdout, stderr=result.stderr
            )
    elif result.stderr and result.stderr.strip():
        # git reports progress (push, pull) on stderr
        logger.debug(result.stderr.strip())

    return result.stdout.strip() if capture_output else None


def is_git_repo(repo_path):
    """
    Checks if a directory is a Git repository.

    Args:
        repo_path (str): The directory path to check.

    Returns:
        bool: True if the directory is a Git repository, False otherwise.
    """
    return (Path(repo_path) / ".git").is_dir()


def parse_git_version(version_output):
    """
    Extract the version number from ``git --version`` output.

    >>> parse_git_version("git version 2.43.0")
    '2.43.0'
    """
    parts = (version_output or "").split()
    if len(parts) < 3:
        return "unknown"
    return parts[2]


def _split_lines(output):
    return [line.strip() for line in (output or "").splitlines() if line.strip()]


def list_local_branches(repo_path):
    """Names of the local branches, sorted."""
    output = run_command(
        ["git", "for-each-ref", "--format=%(refname:short)", "refs/heads"],
        cwd=repo_path,
        capture_output=True
    )
    return sorted(_split_lines(output))


def list_remote_branches(repo_path, remote_name="origin"):
    """
    Remote-tracking branches of one remote, as 'remote/branch' names.

    The symbolic 'remote/HEAD' entry is left out.
    """
    output = run_command(
        ["git", "for-each-ref", "--format=%(refname:short)", f"refs/remotes/{remote_name}"],
        cwd=repo_path,
        capture_output=True
    )
    return sorted(name for name in _split_lines(output) if name != f"{remote_name}/HEAD")


def list_upstreams(repo_path):
    """
    Map each local branch to its configured upstream ('' when it has none).

    Returns:
        dict: branch name -> upstream short name.
    """
    output = run_command(
        ["git", "for-each-ref", "--format=%(refname:short)\t%(upstream:short)", "refs/heads"],
        cwd=repo_path,
        capture_output=True
    )
    upstreams = {}
    for line in (output or "").splitlines():
        if not line.strip():
            continue
        branch, _, upstream = line.partition("\t")
        upstreams[branch.strip()] = upstream.strip()
    return upstreams


def find_gone_branches(upstreams, remote_branches, remote_name="origin"):
    """
    Local branches whose upstream on ``remote_name`` no longer exists.

    Branches without an upstream, or tracking another remote, are kept.

    Args:
        upstreams (dict): branch -> upstream short name, from list_upstreams.
        remote_branches (list): 'remote/branch' names still on the remote.

    Returns:
        list: Sorted branch names that can be pruned.
    """
    known = set(remote_branches)
    prefix = f"{remote_name}/"
    return sorted(
        branch for branch, upstream in upstreams.items()
        if upstream.startswith(prefix) and upstream not in known
    )
