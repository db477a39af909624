"""CLI entry point for enstate."""

from __future__ import annotations

import dataclasses
import importlib
import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from enstate import __version__
from enstate.config.settings import EnstateConfig, load_config
from enstate.driver import Driver, edge_label
from enstate.errors import TransitionError
from enstate.machine import Machine
from enstate.utils.logging import configure_logging, get_logger
from enstate.utils.result import ExitCode


class TargetError(Exception):
    """A module:factory target could not be turned into a machine."""

    pass


class Context:
    """CLI context for sharing state between commands."""

    def __init__(self, config: EnstateConfig) -> None:
        self.config = config
        self.logger = get_logger("cli")


pass_context = click.make_pass_decorator(Context)


def output_json(data: dict) -> None:
    """Output JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=repr))


def load_target(target: str) -> Machine:
    """
    Build a machine from a "package.module:factory" import path.

    The attribute may be a Machine instance or a callable taking no
    arguments that returns one.

    Raises:
        TargetError: If the target cannot be imported or is not a machine
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise TargetError(f"Target must look like 'module:factory', got {target!r}")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetError(f"Cannot import {module_name!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise TargetError(f"{module_name!r} has no attribute {attr_path!r}") from e

    if not isinstance(obj, Machine) and callable(obj):
        obj = obj()

    if not isinstance(obj, Machine):
        raise TargetError(f"{target!r} did not produce a Machine, got {type(obj).__name__}")

    return obj


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to YAML config file (default: $ENSTATE_CONFIG)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level (overrides config)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format (overrides config)",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    enstate - drive composable state machines from the command line.

    TARGET arguments are import paths of the form package.module:factory,
    where factory is a Machine or a zero-argument callable returning one.
    """
    result = load_config(config_path)
    if result.is_err():
        click.echo(str(result.unwrap_err()), err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)
    config = result.unwrap()

    configure_logging(
        level=log_level or config.logging.level,
        format_type=log_format or config.logging.format,
    )

    ctx.obj = Context(config=config)


def _machine_or_exit(ctx: Context, target: str) -> Machine:
    try:
        return load_target(target)
    except TargetError as e:
        ctx.logger.error("target_load_failed", target=target, error=str(e))
        output_json({"status": "error", "message": str(e)})
        sys.exit(ExitCode.TARGET_ERROR)


@cli.command()
@click.argument("target")
@pass_context
def inspect(ctx: Context, target: str) -> None:
    """Show the initial state and menu of a machine."""
    machine = _machine_or_exit(ctx, target)

    output_json({
        "status": "success",
        "target": target,
        "machine": type(machine).__name__,
        "state": machine.state(),
        "menu": [edge_label(edge) for edge in machine.edges()],
    })


@cli.command()
@click.argument("target")
@click.option(
    "--step",
    "steps",
    multiple=True,
    help="Label of an edge to traverse (can be repeated)",
)
@click.option(
    "--interactive",
    is_flag=True,
    default=False,
    help="Prompt for each edge from the current menu",
)
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Fail on the first edge that is not on the menu (overrides config)",
)
@click.option(
    "--max-steps",
    type=int,
    default=None,
    help="Stop after this many steps (overrides config)",
)
@click.option(
    "--until-finished",
    is_flag=True,
    default=False,
    help="Stop as soon as the machine produces a result",
)
@pass_context
def run(
    ctx: Context,
    target: str,
    steps: tuple[str, ...],
    interactive: bool,
    strict: Optional[bool],
    max_steps: Optional[int],
    until_finished: bool,
) -> None:
    """Drive a machine through a sequence of labelled edges."""
    machine = _machine_or_exit(ctx, target)

    overrides: dict[str, Any] = {}
    if strict is not None:
        overrides["strict"] = strict
    if max_steps is not None:
        overrides["max_steps"] = max_steps
    if until_finished:
        overrides["stop_when_finished"] = True
    driver_config = dataclasses.replace(ctx.config.driver, **overrides)

    driver = Driver(machine, driver_config)

    ctx.logger.info("run_started", target=target, steps=len(steps), interactive=interactive)

    labels = _prompt_labels(driver) if interactive else steps

    failure: Optional[TransitionError] = None
    try:
        result = driver.run_labels(labels)
        if result.is_err():
            failure = result.unwrap_err()
    except TransitionError as e:
        failure = e

    summary = driver.summary()
    if failure is not None:
        output_json({
            "status": "rejected",
            "message": str(failure),
            **summary,
        })
        sys.exit(ExitCode.TRANSITION_REJECTED)

    output_json({"status": "success", **summary})


def _prompt_labels(driver: Driver):
    """Yield labels chosen at the terminal until the menu is empty or 'quit'."""
    while True:
        menu = [edge_label(edge) for edge in driver.menu()]
        if not menu:
            return

        click.echo(f"state: {driver.current_state()!r}", err=True)
        choice = click.prompt(
            "edge",
            type=click.Choice(menu + ["quit"], case_sensitive=False),
            err=True,
        )
        if choice.lower() == "quit":
            return
        yield choice


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
