"""CLI subcommands for the woodquote application.

- templates: List furniture templates and create starter configurations
"""

from woodquote.cli.commands.templates import templates_app

__all__ = ["templates_app"]
