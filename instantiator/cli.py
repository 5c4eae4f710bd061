"""
Instantiator CLI.

Commands:
    tree            - Build a class and print its injected object graph
    implementations - List the discovered implementations of an interface
"""

import logging
import os
import sys
from typing import Optional

import click

from . import __version__
from .config import ConfigError, ConfigLoader, import_object
from .errors import InstantiatorError, type_name
from .factory import ObjectFactory
from .graph import render_tree
from .introspection import is_interface


def _error(message: str) -> None:
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)


def _build_factory(ctx: click.Context) -> ObjectFactory:
    opts = ctx.obj
    config = ConfigLoader.load(
        path=opts["config_path"],
        env_file=opts["env_file"],
        overrides=opts["overrides"],
    )
    return ObjectFactory.from_config(config)


@click.group()
@click.version_option(version=__version__, prog_name="instantiator")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML or JSON config file")
@click.option("--env-file", type=click.Path(dir_okay=False), help=".env file with INSTANTIATOR_* settings")
@click.option("--package", help="Look up implementations in this package only")
@click.option("--loaded", is_flag=True, help="Look up implementations in all imported modules")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(
    ctx,
    config_path: Optional[str],
    env_file: Optional[str],
    package: Optional[str],
    loaded: bool,
    verbose: bool,
):
    """Build object graphs by injecting annotated fields.

    \b
    Targets are given as module:Class, e.g.
      instantiator tree myapp.services:SignupService
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Console scripts do not put the working directory on sys.path
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["env_file"] = env_file
    ctx.obj["overrides"] = {
        "package": package,
        "scope": "loaded" if loaded else None,
    }


@cli.command("tree")
@click.argument("target")
@click.pass_context
def tree(ctx, target: str):
    """Build TARGET and print its object graph."""
    try:
        factory = _build_factory(ctx)
        cls = import_object(target)
        instance = factory.obtain(cls)
    except (ConfigError, InstantiatorError) as e:
        _error(str(e))
        ctx.exit(1)

    if instance is None:
        _error(f"{type_name(cls)} could not be constructed")
        ctx.exit(1)

    click.echo(render_tree(factory, instance))


@cli.command("implementations")
@click.argument("target")
@click.pass_context
def implementations(ctx, target: str):
    """List the implementations discovered for interface TARGET."""
    try:
        factory = _build_factory(ctx)
        interface = import_object(target)
    except ConfigError as e:
        _error(str(e))
        ctx.exit(1)

    if not is_interface(interface):
        _error(f"{target} is not an interface")
        ctx.exit(1)

    found = sorted(factory.discovery.find_implementations(interface), key=type_name)
    if not found:
        click.echo(click.style(f"No implementations of {type_name(interface)}", fg="yellow"))
        return

    for cls in found:
        click.echo(f"  {click.style('•', fg='cyan')} {type_name(cls)}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
