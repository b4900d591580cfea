"""
Handles the 'log' command: show the decorated history graph.
"""

import click

from ..config import load_config, configure_logging
from ..render import render_graph
from ..cli_utils import standard_command, add_common_options
from .prune import open_repository


@click.command("log")
@add_common_options('dir', 'verbose')
@standard_command()
def log_handler(directory, verbose, progress, **kwargs):
    """Print the commit graph of every branch and tag."""
    config = load_config()
    configure_logging(config, verbose)
    repo = open_repository(directory, config)
    render_graph(repo.log_graph())
    return None
