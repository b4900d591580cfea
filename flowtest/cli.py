#!/usr/bin/env python3

import click

from flowtest.commands.run import run_handler
from flowtest.commands.steps import steps_handler
from flowtest.commands.prune import prune_handler
from flowtest.commands.log import log_handler
from flowtest.commands.config import config_cmd


@click.group()
@click.version_option(package_name="flowtest")
def cli():
    """Simulate a GitHub-like git flow and record the history it makes."""
    pass


cli.add_command(run_handler, name='run')
cli.add_command(steps_handler, name='steps')
cli.add_command(prune_handler, name='prune')
cli.add_command(log_handler, name='log')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
