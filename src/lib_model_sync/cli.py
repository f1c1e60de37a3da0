"""CLI adapter for ``lib_model_sync`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators connect a repository, inspect the synchronised model list, and
validate config files locally without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling and the state directory.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_settings` – ``show``/``set``/``test``/``clear`` for connection settings.
* :func:`cli_fetch` / :func:`cli_list` / :func:`cli_refresh` – remote model list.
* :func:`cli_file` – auxiliary file content or its links.
* :func:`cli_decode` – decode and normalize a local config file.
* :func:`cli_generate_examples` – writes sample ``models.yaml``/``models.json``.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI is the outermost layer. Every command opens a session through the
composition root (:func:`lib_model_sync.core.open_session`) and never touches
adapters directly. ``lib_cli_exit_tools`` centralises exit codes and error
rendering so domain errors surface as their one-line message.
"""

from __future__ import annotations

import asyncio
import json
from importlib import metadata
from pathlib import Path
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.github.contents import blob_url, raw_url
from .application.catalog import ALL_STATUSES, filter_models
from .core import Session, check_connection, decode_file, disconnect, fetch_models, load_models, open_session
from .domain.errors import NotConfigured
from .domain.model import DEFAULT_BRANCH, DEFAULT_CONFIG_PATH, ConnectionSettings, Model, ModelStatus
from .examples import generate_examples as _generate_examples

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

STATUS_CHOICES: Final[tuple[str, ...]] = (ALL_STATUSES, *(status.value for status in ModelStatus))
_MASKED_TOKEN: Final[str] = "***"


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_model_sync")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Synchronise an ML model registry with a GitHub-hosted config file",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_model_sync",
    message="lib_model_sync version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--state-dir",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
    default=None,
    help="Directory holding state.json (defaults to the platform state directory)",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, state_dir: Optional[Path]) -> None:
    """Root command storing the traceback preference and state directory.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    ctx.obj["state_dir"] = state_dir
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_model_sync")
    except metadata.PackageNotFoundError:
        click.echo("lib_model_sync (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_model_sync')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.group("settings", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_settings() -> None:
    """Show, store, or clear the GitHub connection settings."""


@cli_settings.command("show", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_settings_show(ctx: click.Context) -> None:
    """Print the active settings (environment overrides applied, token masked)."""

    settings = _session(ctx).active_settings()
    if settings is None:
        click.echo(str(NotConfigured()))
        return
    click.echo(json.dumps(_masked(settings), indent=2))


def _connection_options(command):
    """Attach the repository options shared by ``settings set`` and ``settings test``."""

    command = click.option("--token", default="", help="Personal access token (omit for public repositories)")(command)
    command = click.option(
        "--path", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True, help="Config file path"
    )(command)
    command = click.option("--branch", default=DEFAULT_BRANCH, show_default=True, help="Branch to read from")(command)
    command = click.option("--repo", required=True, help="Repository name")(command)
    return click.option("--owner", required=True, help="Repository owner (user or organisation)")(command)


@cli_settings.command("set", context_settings=CLICK_CONTEXT_SETTINGS)
@_connection_options
@click.pass_context
def cli_settings_set(ctx: click.Context, owner: str, repo: str, branch: str, config_path: str, token: str) -> None:
    """Store connection settings; any cached models are discarded."""

    settings = _connection_settings(owner, repo, branch, config_path, token)
    _session(ctx).settings.save(settings)
    click.echo(f"Saved settings for {settings.identity}")


@cli_settings.command("test", context_settings=CLICK_CONTEXT_SETTINGS)
@_connection_options
@click.pass_context
def cli_settings_test(ctx: click.Context, owner: str, repo: str, branch: str, config_path: str, token: str) -> None:
    """Fetch the config file with these settings without saving them."""

    settings = _connection_settings(owner, repo, branch, config_path, token)
    models = asyncio.run(check_connection(_session(ctx), settings))
    click.echo(f"Connected to {settings.identity}: {len(models)} models")


@cli_settings.command("clear", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_settings_clear(ctx: click.Context) -> None:
    """Forget stored settings and cached models."""

    disconnect(_session(ctx))
    click.echo("Disconnected")


@cli.command("fetch", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--refresh/--no-refresh", default=False, help="Bypass the cache for this fetch")
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.pass_context
def cli_fetch(ctx: click.Context, refresh: bool, indent: Optional[int]) -> None:
    """Fetch the configured model list and print it as JSON.

    Unlike ``list`` this command fails when the repository cannot be read.
    """

    models = asyncio.run(fetch_models(_session(ctx), refresh=refresh))
    click.echo(_models_json(models, indent))


@cli.command("list", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--status",
    type=click.Choice(STATUS_CHOICES, case_sensitive=False),
    default=ALL_STATUSES,
    show_default=True,
    help="Only show models with this lifecycle status",
)
@click.option("--search", default="", help="Case-insensitive text matched against name, description, framework")
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@click.pass_context
def cli_list(ctx: click.Context, status: str, search: str, indent: Optional[int]) -> None:
    """Print the active model list, falling back to the local catalogue.

    The connection status (and the failure message, if any) is written to
    stderr so stdout stays valid JSON.
    """

    result = asyncio.run(load_models(_session(ctx)))
    click.echo(f"status: {result.status.value}", err=True)
    if result.error:
        click.echo(f"error: {result.error}", err=True)
    click.echo(_models_json(filter_models(result.models, search=search, status=status.lower()), indent))


@cli.command("refresh", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_refresh(ctx: click.Context) -> None:
    """Drop cached models so the next fetch goes to the remote."""

    _session(ctx).cache.invalidate()
    click.echo("Cache cleared")


@cli.command("file", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("path")
@click.option("--url/--no-url", "show_url", default=False, help="Print browse and raw links instead of content")
@click.pass_context
def cli_file(ctx: click.Context, path: str, show_url: bool) -> None:
    """Print a file (model card, script) from the configured repository."""

    session = _session(ctx)
    if show_url:
        settings = session.active_settings()
        if settings is None:
            raise NotConfigured()
        click.echo(blob_url(settings, path))
        click.echo(raw_url(settings, path))
        return
    click.echo(asyncio.run(session.files.fetch_file_content(path)), nl=False)


@cli.command("decode", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument(
    "source",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
)
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
def cli_decode(source: Path, indent: Optional[int]) -> None:
    """Decode a local ``.yaml``/``.yml``/``.json`` config file and print normalized models."""

    click.echo(_models_json(decode_file(source), indent))


@cli.command("generate-examples", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--destination",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True, resolve_path=True),
    required=True,
    help="Directory that will receive the example files",
)
@click.option(
    "--force/--no-force",
    default=False,
    help="Overwrite existing example files if set",
    show_default=True,
)
def cli_generate_examples(destination: Path, force: bool) -> None:
    """Generate sample ``models.yaml`` and ``models.json`` under *destination*."""

    created = _generate_examples(destination, force=force)
    click.echo(json.dumps([str(path) for path in created], indent=2))


def _session(ctx: click.Context) -> Session:
    """Open a session for the state directory chosen on the root command."""

    obj = ctx.find_root().obj or {}
    return open_session(obj.get("state_dir"))


def _connection_settings(owner: str, repo: str, branch: str, config_path: str, token: str) -> ConnectionSettings:
    return ConnectionSettings(
        repo_owner=owner.strip(),
        repo_name=repo.strip(),
        branch=branch.strip() or DEFAULT_BRANCH,
        config_path=config_path.strip() or DEFAULT_CONFIG_PATH,
        token=token.strip(),
    )


def _models_json(models: Sequence[Model], indent: Optional[int]) -> str:
    return json.dumps([model.to_dict() for model in models], indent=indent)


def _masked(settings: ConnectionSettings) -> dict[str, str]:
    """Return the settings record with the token replaced by a placeholder."""

    record = settings.to_dict()
    if record["token"]:
        record["token"] = _MASKED_TOKEN
    return record


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Entry point wiring the CLI through ``lib_cli_exit_tools.run_cli``.

    Parameters
    ----------
    argv:
        Optional sequence of CLI arguments. ``None`` uses ``sys.argv``.
    restore_traceback:
        When ``True`` the traceback configuration is reset after execution so
        embedding applications keep their own settings.

    Returns
    -------
    int
        Exit code produced by the command.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_model_sync",
            )
        except BaseException as exc:  # noqa: BLE001 - handled by shared printers
            tracebacks_enabled = bool(getattr(lib_cli_exit_tools.config, "traceback", False))
            length_limit = _TRACEBACK_VERBOSE_LIMIT if tracebacks_enabled else _TRACEBACK_SUMMARY_LIMIT
            lib_cli_exit_tools.print_exception_message(trace_back=tracebacks_enabled, length_limit=length_limit)
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color
