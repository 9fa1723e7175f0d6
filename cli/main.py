"""Command line interface for the extension base library."""

from __future__ import annotations

import importlib
from pathlib import Path

import click

from extbase.base import ExtensionBase
from extbase.identity import hide_activation_key
from hostkit.config import ExtensionSettings, load_settings
from hostkit.context import create_memory_host
from hostkit.exceptions import ExtensionError
from hostkit.logger import setup_logging
from hostkit.options import JsonOptionStore


def _load_extension_class(target: str) -> type[ExtensionBase]:
    module_name, _, class_name = target.partition(":")
    if not module_name or not class_name:
        raise click.BadParameter("expected MODULE:CLASS", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"cannot import {module_name}: {exc}", param_hint="TARGET") from exc

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, ExtensionBase):
        raise click.BadParameter(
            f"{target} is not an ExtensionBase subclass", param_hint="TARGET"
        )
    return cls


def _settings(ctx: click.Context) -> ExtensionSettings:
    return ctx.obj["settings"]


@click.group()
@click.version_option(version="1.0.0", prog_name="extbase")
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Config file path")
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def cli(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """Extension Base CLI"""
    try:
        settings = load_settings(config)
    except (ExtensionError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    logging_conf = settings.logging.model_dump()
    if log_level:
        logging_conf["level"] = log_level
    setup_logging(logging_conf)

    ctx.obj = {"settings": settings}


@cli.command()
@click.argument("target")
@click.pass_context
def inspect(ctx: click.Context, target: str) -> None:
    """Construct TARGET (MODULE:CLASS) and print its identity and bindings."""
    cls = _load_extension_class(target)
    host = create_memory_host(_settings(ctx))
    extension = cls(host)

    identity = extension.identity
    click.echo(f"class={cls.__name__}")
    for field_name, value in identity.model_dump().items():
        click.echo(f"{field_name}={value}")
    click.echo(f"state={extension.state.value}")

    click.echo(f"warnings={len(extension.warnings)}")
    for warning in extension.warnings:
        click.echo(f"  - {warning}")

    click.echo("bindings:")
    for binding in extension.bindings:
        click.echo(f"  {binding.event_name} -> {binding.handler_name}")


@cli.group()
def flags() -> None:
    """Manage the persisted activation-dismiss flag"""


def _option_store(ctx: click.Context, root: str) -> JsonOptionStore:
    return JsonOptionStore(Path(root) / _settings(ctx).storage.options_path)


@flags.command("show")
@click.argument("slug")
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Storage root")
@click.pass_context
def show_flag(ctx: click.Context, slug: str, root: str) -> None:
    """Print whether SLUG's activation announcement is hidden."""
    key = hide_activation_key(slug)
    try:
        state = "set" if _option_store(ctx, root).get(key) else "unset"
    except ExtensionError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{key}={state}")


@flags.command("clear")
@click.argument("slug")
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Storage root")
@click.pass_context
def clear_flag(ctx: click.Context, slug: str, root: str) -> None:
    """Show SLUG's activation announcement again."""
    key = hide_activation_key(slug)
    try:
        _option_store(ctx, root).delete(key)
    except ExtensionError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"cleared {key}")


if __name__ == "__main__":
    cli()
