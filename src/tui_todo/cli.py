"""CLI entry point using Click."""

from __future__ import annotations

from pathlib import Path

import click

from tui_todo.config import (
    CONFIG_DIR_ENV,
    configure_logging,
    default_config_dir,
    load_config,
    resolve_data_path,
)
from tui_todo.storage import StorageError, TodoStore


class _DefaultGroup(click.Group):
    """Insert 'run' when the first arg is not a registered subcommand."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.no_args_is_help = False  # bare `tui-todo` runs the TUI

    def invoke(self, ctx):
        if not ctx._protected_args and not ctx.args:
            ctx._protected_args = ["run"]
        return super().invoke(ctx)

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else None
        if cmd_name and cmd_name in self.commands:
            return super().resolve_command(ctx, args)
        return super().resolve_command(ctx, ["run"] + list(args))


def _open_store(ctx: click.Context) -> TodoStore:
    config = ctx.obj["config"]
    path = resolve_data_path(ctx.obj["config_dir"], config, ctx.obj["file"])
    return TodoStore(path, backup=config.backup, max_length=config.max_length)


@click.group(cls=_DefaultGroup)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=CONFIG_DIR_ENV,
    default=None,
    help="Directory for config, theme and data (default: ~/.tui-todo)",
)
@click.option("-f", "--file", "file_", default=None, help="Todo data file (overrides config)")
@click.option("--no-color", is_flag=True, help="Disable color output")
@click.version_option(package_name="tui-todo")
@click.pass_context
def main(ctx, config_dir: Path | None, file_: str | None, no_color: bool) -> None:
    """TUI Todo - a vi-style terminal todo list."""
    config_dir = (config_dir or default_config_dir()).expanduser()
    config = load_config(config_dir)
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir
    ctx.obj["config"] = config
    ctx.obj["file"] = file_
    ctx.obj["no_color"] = no_color


@main.command()
@click.pass_context
def run(ctx) -> None:
    """Open the todo list in the terminal UI."""
    from tui_todo import theme
    from tui_todo.app import TodoApp

    config_dir = ctx.obj["config_dir"]
    config = ctx.obj["config"]
    store = _open_store(ctx)
    configure_logging(config_dir, config)
    try:
        state = store.load()
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    theme.load_theme(config_dir)
    app = TodoApp(store=store, state=state, config=config, no_color=ctx.obj["no_color"])
    app.run()
    if app.return_code:
        raise SystemExit(app.return_code)


@main.command("list")
@click.option("--all", "show_all", is_flag=True, help="Show done items too")
@click.pass_context
def list_cmd(ctx, show_all: bool) -> None:
    """Print the saved todo list."""
    store = _open_store(ctx)
    try:
        state = store.load()
    except StorageError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    shown = [
        (i, item)
        for i, item in enumerate(state.items, start=1)
        if not item.is_empty and (show_all or not item.done)
    ]
    if not shown:
        click.echo("(no todos)")
        return
    for i, item in shown:
        click.echo(f"{i:>3}.{item.render().rstrip()}")


@main.command("path")
@click.pass_context
def path_cmd(ctx) -> None:
    """Show the absolute path to the todo data file."""
    click.echo(str(_open_store(ctx).path.resolve()))


@main.command("init-config")
@click.pass_context
def init_config_cmd(ctx) -> None:
    """Write a config.toml with the current settings."""
    from tui_todo.config import CONFIG_FILE, save_config

    config_dir = ctx.obj["config_dir"]
    if (config_dir / CONFIG_FILE).exists():
        click.echo(f"Already exists: {config_dir / CONFIG_FILE}", err=True)
        raise SystemExit(1)
    try:
        dest = save_config(config_dir, ctx.obj["config"])
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Created {dest}")


@main.command("init-theme")
@click.pass_context
def init_theme_cmd(ctx) -> None:
    """Copy the default theme to theme.yaml for customization."""
    from tui_todo.theme import init_theme

    try:
        dest = init_theme(ctx.obj["config_dir"])
    except FileExistsError as e:
        click.echo(f"Already exists: {e}", err=True)
        raise SystemExit(1)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Created {dest}")
