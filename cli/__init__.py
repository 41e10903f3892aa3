"""Subcommands of the zeca CLI."""
