# cli/commands/generate.py
"""CLI commands for recipe generation."""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
import structlog

from codegen.config import get_settings
from codegen.engine import CodeGenerator
from codegen.exceptions import CodegenError, ConfigurationError
from codegen.loader import RecipeParser, load_project_config


def configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else get_settings().log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


@click.command()
@click.option('--config', '-c', 'config_file', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Project config file')
@click.option('--recipe', '-r', 'recipes', multiple=True,
              help='Recipe to generate (default: every recipe in the config)')
@click.option('--recipes-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Directory holding <recipe>/recipe.yaml')
@click.option('--dry-run', is_flag=True, help='Resolve artifacts without writing them')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def generate(config_file: Path, recipes: Tuple[str, ...], recipes_dir: Optional[Path],
             dry_run: bool, verbose: bool):
    """Generate artifacts for the recipes of a project config."""
    configure_logging(verbose)

    try:
        generator = CodeGenerator.from_config_file(config_file, recipes_dir=recipes_dir)
        names = list(recipes) or generator.config.recipes
        if not names:
            click.echo("❌ No recipes to generate")
            sys.exit(1)

        for name in names:
            click.echo(f"\n******** Generate {name} ********")
            result = generator.generate_recipe(name, dry_run=dry_run)

            if dry_run:
                click.echo(f"📄 {len(result.artifacts)} artifacts would be written to {result.dist}")
                for artifact in result.artifacts:
                    click.echo(f"   {artifact.path}")
            else:
                click.echo(f"✅ Wrote {len(result.written)} files to {result.dist}")

    except ConfigurationError as e:
        click.echo(f"❌ Invalid configuration: {e}")
        sys.exit(1)
    except CodegenError as e:
        click.echo(f"❌ Generation failed: {e}")
        sys.exit(1)
    except OSError as e:
        click.echo(f"❌ I/O error: {e}")
        sys.exit(1)


@click.command()
@click.option('--config', '-c', 'config_file', required=True,
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Project config file')
@click.option('--recipes-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Directory holding <recipe>/recipe.yaml')
def validate(config_file: Path, recipes_dir: Optional[Path]):
    """Validate the project config and every recipe it lists."""
    configure_logging(False)
    settings = get_settings()

    try:
        config = load_project_config(config_file)
    except ConfigurationError as e:
        click.echo(f"❌ {e}")
        sys.exit(1)

    base_dir = recipes_dir or Path(settings.recipes_dir)
    failed = False
    for name in config.recipes:
        parser = RecipeParser()
        recipe_file = base_dir / name / settings.recipe_file
        try:
            recipe = parser.parse_file(name, recipe_file)
        except (ConfigurationError, OSError) as e:
            click.echo(f"❌ {name}: {e}")
            failed = True
            continue

        for warning in parser.warnings:
            click.echo(f"⚠️  {name}: {warning.path}: {warning.message}")
        click.echo(f"✅ {name}: {len(recipe.artifacts)} artifacts, {len(recipe.templates)} templates")

    if failed:
        sys.exit(1)
