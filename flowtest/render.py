"""
Output rendering functions for flowtest.
Handles formatting and displaying data in various formats.
"""
import click
from rich.console import Console
from rich.table import Table

# Tables go to stdout; logging and progress use stderr
console = Console()


def render_step_table(results, title="Workflow Steps"):
    """
    Render step results as a table.

    Args:
        results: List of step result dictionaries from WorkflowRunner
    """
    if not results:
        console.print("No steps were run.")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Step", style="green")
    table.add_column("Status")
    table.add_column("Commands", justify="right")
    table.add_column("Time", justify="right")

    for result in results:
        status = result.get("status", "")
        style = "green" if status == "ok" else "yellow"
        table.add_row(
            str(result["step"]),
            result["name"],
            f"[{style}]{status}[/{style}]",
            str(len(result.get("commands", []))),
            f"{result.get('duration', 0):.2f}s",
        )
    console.print(table)


def render_catalog(steps):
    """Render the step catalog."""
    table = Table(title="Flow Steps", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("What it does")
    for step in steps:
        table.add_row(str(step.number), step.name, step.title)
    console.print(table)


def render_graph(output):
    """Pass the git log graph through untouched."""
    if output:
        click.echo(output)
