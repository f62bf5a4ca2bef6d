"""Defines the command-line interface for quidquid.

This module uses the `click` library to expose field extraction on JSON
documents from the shell. Documents can be read from files, standard input,
or HTTP(S) URLs; fields are addressed with dotted paths and checked with the
same accessors library callers use.
"""
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
import requests
from halo import Halo
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.accessor import Quidquid, accessor_from
from .core.config import Config
from .core.errors import FieldError
from .core.registry import checker_from_config
from .utils.extract import KIND_METHODS, extract, parse_field_spec, unwrap
from .utils.loader import is_url, load_document

# Rich consoles for regular and error output.
console = Console(emoji=True)
err_console = Console(stderr=True)

# Set up basic logging.
logger = logging.getLogger(__name__)


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._aliases: Dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Gets a command by name, checking for aliases and prefixes.

        Args:
            ctx: The click context.
            cmd_name: The command name entered by the user.

        Returns:
            The matched click command, or None.
        """
        cmd_name = cmd_name.lower()
        # Exact match
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        # Alias match
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        # Prefix match
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        self._aliases[alias.lower()] = command_name.lower()


def _fail(message: str) -> None:
    err_console.print(f"[red]{escape(message)}[/red]")
    sys.exit(1)


def _prepare(config_path: Optional[str]) -> Config:
    """Loads the config and applies its output settings."""
    config_obj = Config(config_path=Path(config_path) if config_path else None)
    console.no_color = not config_obj.get("colors", True)
    return config_obj


def _open_document(source: str, config: Config) -> Quidquid:
    """Loads `source` and wraps it in an accessor using the configured checker.

    Exits with status 1 if the document or the checker cannot be resolved.
    """
    timeout = config.get("timeout", 30)
    retries = config.get("retries", 3)
    try:
        checker = checker_from_config(config)
    except ValueError as e:
        _fail(str(e))

    if is_url(source):
        # stdout carries only the extracted value.
        with Halo(text=f"Fetching {source}...", spinner="dots", stream=sys.stderr) as spinner:
            try:
                document = load_document(source, timeout=timeout, retries=retries)
                spinner.succeed(f"Fetched {source}")
            except (ValueError, requests.RequestException) as e:
                spinner.fail(f"Could not fetch {source}: {e}")
                sys.exit(1)
    else:
        try:
            document = load_document(source, timeout=timeout, retries=retries)
        except ValueError as e:
            _fail(str(e))

    return accessor_from(document, checker=checker)


def _wants_json(json_output: bool, config: Config) -> bool:
    return json_output or config.get("output.format") == "json"


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="quidquid")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Extract and validate typed fields from JSON documents.

    Fields are addressed with dotted paths (e.g. `user.address.city`) and
    checked against a kind. Failures are reported with the full path of the
    offending field.
    """
    log_level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'quidquid pick <source> <field> --kind <kind>' to extract a field, or 'quidquid --help' for more commands.")


@main.command()
@click.argument("source", type=str)
@click.argument("field", type=str)
@click.option("--kind", "-k", type=click.Choice(list(KIND_METHODS)), default="string", show_default=True, help="Expected kind of the field.")
@click.option("--optional", "-o", is_flag=True, help="Print null instead of failing when the field is absent.")
@click.option("--json", "json_output", is_flag=True, help="Output the value as JSON.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def pick(source: str, field: str, kind: str, optional: bool, json_output: bool, config_path: Optional[str]) -> None:
    """Extract a single field from a JSON document.

    SOURCE is a file path, '-' for standard input, or an http(s) URL.
    FIELD is a dotted path; use '.' to read the whole document as an array.
    """
    config_obj = _prepare(config_path)
    accessor = _open_document(source, config_obj)

    try:
        result = unwrap(asyncio.run(extract(accessor, field, kind, optional=optional)))
    except FieldError as e:
        _fail(str(e))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="FIELD")

    if _wants_json(json_output, config_obj):
        click.echo(json.dumps(result))
    elif result is None:
        console.print("[yellow]null[/yellow]")
    else:
        console.print(escape(_render_value(result)), highlight=False)


async def _extract_all(accessor: Quidquid, specs: List[Tuple[str, str, bool]]) -> List[Any]:
    """Extracts every field concurrently, collecting failures instead of raising."""
    return await asyncio.gather(
        *(extract(accessor, path, kind, optional=optional) for path, kind, optional in specs),
        return_exceptions=True,
    )


@main.command()
@click.argument("source", type=str)
@click.option("--field", "-f", "fields", multiple=True, required=True, help="Field spec PATH:KIND, e.g. 'user.name:string' or 'tags:string-array?'.")
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
def check(source: str, fields: Tuple[str, ...], json_output: bool, config_path: Optional[str]) -> None:
    """Check several fields of a JSON document at once.

    Every field is extracted independently, so one failing field does not
    hide the others. The command exits with a non-zero status code if any
    field fails.
    """
    try:
        specs = [parse_field_spec(spec) for spec in fields]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--field")

    config_obj = _prepare(config_path)
    accessor = _open_document(source, config_obj)
    outcomes = asyncio.run(_extract_all(accessor, specs))

    rows = []
    for (path, kind, optional), outcome in zip(specs, outcomes):
        if isinstance(outcome, BaseException) and not isinstance(outcome, ValueError):
            raise outcome
        row: Dict[str, Any] = {"field": path or "body", "kind": kind + ("?" if optional else ""), "ok": not isinstance(outcome, ValueError)}
        if row["ok"]:
            row["value"] = unwrap(outcome)
        else:
            row["error"] = str(outcome)
        rows.append(row)

    if _wants_json(json_output, config_obj):
        click.echo(json.dumps(rows, indent=2))
    else:
        _display_rows(rows)

    if not all(row["ok"] for row in rows):
        sys.exit(1)


def _display_rows(rows: List[Dict[str, Any]]) -> None:
    """Displays field check results in a table followed by a summary panel."""
    table = Table(title="Field Check Results")
    table.add_column("Field", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Status")
    table.add_column("Value")
    for row in rows:
        if row["ok"]:
            table.add_row(row["field"], row["kind"], "[green]OK[/green]", escape(_render_value(row["value"])))
        else:
            table.add_row(row["field"], row["kind"], "[red]FAILED[/red]", escape(row["error"]))
    console.print(table)

    failed = sum(1 for row in rows if not row["ok"])
    if failed:
        console.print(Panel(f"{failed} of {len(rows)} field(s) failed.", style="red", title="Check Complete"))
    else:
        console.print(Panel(f"All {len(rows)} field(s) passed.", style="green", title="Check Complete"))


@main.command()
@click.argument("action", type=click.Choice(['get', 'set', 'list', 'reset']), required=True)
@click.argument("key", type=str, required=False)
@click.argument("value", type=str, required=False)
def config(action: str, key: Optional[str], value: Optional[str]) -> None:
    """Manage the quidquid configuration.

    This command allows you to view, set, and reset configuration values
    that are stored in the user-level configuration file.

    \b
    ACTION:
        get <key>       Get a configuration value.
        set <key> <value> Set a configuration value.
        list            List all current configuration values.
        reset           Reset the configuration to its default state.
    """
    config_obj = Config()
    if action == "list":
        console.print(Panel(json.dumps(config_obj.config, indent=2), title="Current Configuration"))
    elif action == "get":
        if not key:
            _fail("Error: 'get' action requires a key.")
        console.print(config_obj.get(key))
    elif action == "set":
        if not key or value is None:
            _fail("Error: 'set' action requires a key and a value.")
        # Type casting for bools and ints
        if value.lower() in ('true', 'false'):
            processed_value: Any = value.lower() == 'true'
        elif value.isdigit():
            processed_value = int(value)
        else:
            processed_value = value
        user_config = Config.from_user_file()
        user_config.set(key, processed_value)
        try:
            user_config.save_user_config()
            console.print(f"[green]'{key}' set to '{processed_value}' and saved to user config.[/green]")
        except IOError as e:
            _fail(f"Error saving configuration: {e}")
    elif action == "reset":
        if Config.reset_user_config():
            console.print("[green]Configuration reset to defaults.[/green]")
        else:
            console.print("[yellow]No user configuration file to reset.[/yellow]")


main.add_alias('p', 'pick')
main.add_alias('c', 'check')

if __name__ == "__main__":
    main()
