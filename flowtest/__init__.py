"""flowtest: a scripted walk through a GitHub-like git branching flow."""

__version__ = "0.1.0"
