"""
Exit codes and the exception hierarchy used by flowtest commands.
"""
import subprocess

import click

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
GIT_ERROR = 3
CONFIG_ERROR = 4
INTERRUPTED = 130


class CommandError(Exception):
    """Base class for errors that map to a specific exit code."""
    exit_code = GENERAL_ERROR

    def __init__(self, message, exit_code=None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class StepFailedError(CommandError):
    """A git command failed while running a workflow step."""
    exit_code = GIT_ERROR

    def __init__(self, step_number, step_name, command, returncode=None, stderr=None):
        self.step_number = step_number
        self.step_name = step_name
        self.command = command
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"Step {step_number} ({step_name}) failed: {command}"
        if returncode is not None:
            message += f" exited with {returncode}"
        super().__init__(message)


class WorkspaceExistsError(CommandError):
    """The workspace directory is already there."""
    exit_code = USAGE_ERROR


class NameCollisionError(CommandError):
    """A tag would reuse the name of a branch that still exists."""
    exit_code = GENERAL_ERROR


class NotARepositoryError(CommandError):
    exit_code = USAGE_ERROR


class ConfigError(CommandError):
    exit_code = CONFIG_ERROR


def get_exit_code_for_exception(exc):
    """Map an arbitrary exception to a process exit code."""
    if isinstance(exc, CommandError):
        return exc.exit_code
    if isinstance(exc, click.UsageError):
        return USAGE_ERROR
    if isinstance(exc, subprocess.CalledProcessError):
        return GIT_ERROR
    if isinstance(exc, KeyboardInterrupt):
        return INTERRUPTED
    return GENERAL_ERROR
