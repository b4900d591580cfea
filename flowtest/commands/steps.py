"""
Handles the 'steps' command: list the flow's steps without running them.
"""

import click

from ..flow import GitHubFlow
from ..models import FlowSettings
from ..render import render_catalog
from ..cli_utils import standard_command, add_common_options


def describe_steps():
    """Catalog entries as dictionaries."""
    return [
        {"step": step.number, "name": step.name, "title": step.title}
        for step in GitHubFlow(FlowSettings()).steps()
    ]


@click.command("steps")
@click.option("--pretty", is_flag=True, help="Display as formatted table instead of JSONL")
@add_common_options('verbose', 'quiet')
@standard_command()
def steps_handler(pretty, progress, **kwargs):
    """List the steps of the flow, in execution order."""
    if pretty:
        render_catalog(GitHubFlow(FlowSettings()).steps())
        return None
    return describe_steps()
