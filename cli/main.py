# cli/main.py
"""Main CLI entry point for Recipe Codegen."""

import click


@click.group()
@click.version_option(version='1.0.0')
def cli():
    """Recipe Codegen CLI - Generate source files from recipes and component metadata."""
    pass


def register_commands():
    """Register all CLI commands."""
    from cli.commands.generate import generate, validate
    cli.add_command(generate)
    cli.add_command(validate)


register_commands()


if __name__ == '__main__':
    cli()
