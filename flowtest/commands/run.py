"""
Handles the 'run' command: the whole flow, start to finish.

- Default output is JSONL streaming, one object per completed step
- --pretty for a table followed by the history graph
- The first failing step stops the run with a non-zero exit code
"""

import click

from ..config import load_config, configure_logging
from ..flow import GitHubFlow
from ..models import FlowSettings
from ..render import render_step_table, render_graph
from ..runner import WorkflowRunner
from ..cli_utils import standard_command, add_common_options


def build_runner(repository_url=None, directory=None, dry_run=False, progress=None, config=None):
    """Assemble settings, flow and runner from config plus CLI overrides."""
    config = config if config is not None else load_config()
    settings = FlowSettings.from_config(
        config,
        repository_url=repository_url,
        workspace=directory,
        dry_run=dry_run,
    )
    return WorkflowRunner(GitHubFlow(settings), progress=progress)


@click.command("run")
@click.option("--repo", "repository_url", default=None,
              help="Remote repository URL (default: from config)")
@click.option("--pretty", is_flag=True, help="Display a table and the history graph instead of JSONL")
@add_common_options('dir', 'dry_run', 'verbose', 'quiet')
@standard_command(streaming=True)
def run_handler(repository_url, pretty, directory, dry_run, verbose, quiet, progress, **kwargs):
    """
    Run the full flow against a fresh workspace.

    \b
    Creates the workspace, initializes a repository attached to the remote,
    then branches, commits, pushes, syncs, merges and tags exactly as the
    flow describes. Stops at the first failing git command.

    Examples:

    \b
        flowtest run
        flowtest run --repo git@github.com:me/flowtest.git -d /tmp/flowtest
        flowtest run --dry-run --pretty
    """
    config = load_config()
    configure_logging(config, verbose)
    runner = build_runner(repository_url, directory, dry_run, progress, config=config)

    if not pretty:
        return runner.run()

    try:
        for result in runner.run():
            progress.success(f"{result['step']}. {result['name']}")
    finally:
        render_step_table(runner.completed)

    if not dry_run:
        render_graph(runner.completed[-1].get("details", {}).get("output"))
    return None
