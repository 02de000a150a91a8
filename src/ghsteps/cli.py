"""ghsteps CLI - Command line interface."""

import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

import click
import yaml

from ghsteps import __version__, env
from ghsteps.env import (
    DEFAULT_SERVER_URL,
    create_default_config,
    ensure_config_dir,
    get_credential,
    get_settings,
    load_config_file,
    save_credential,
    validate_required_credentials,
)


def parse_value(raw: str) -> Any:
    """Read a command line value as YAML.

    So "12" gives an int, "true" a bool and "[bug, docs]" a list. Values
    YAML can't parse, dates, text YAML reads as a comment (like
    "#ff0000") and "Fix: crash" style text stay strings. Mappings must be
    written in braces.
    """
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    if value is None and raw.strip().lower() not in ("null", "~"):
        return raw
    if isinstance(value, date):
        return raw
    if isinstance(value, dict) and not raw.lstrip().startswith("{"):
        return raw
    return value


def parse_pairs(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Parse KEY=VALUE pairs."""
    result: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Use format KEY=VALUE: {pair}")
        key, raw = pair.split("=", 1)
        result[key.strip()] = parse_value(raw)
    return result


def parse_headers(pairs: tuple[str, ...]) -> dict[str, str]:
    headers = {}
    for pair in pairs:
        if ":" not in pair:
            raise click.BadParameter(f"Use format Name:Value: {pair}")
        name, value = pair.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def require_token() -> None:
    """Exit with a hint if no token is configured."""
    missing = validate_required_credentials()
    if missing:
        click.secho("Missing required credentials:", fg="red")
        for cred in missing:
            click.echo(f"  - {cred}")
        click.echo("\nRun 'ghsteps config' to configure credentials.")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="ghsteps")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and responses")
def cli(verbose: bool) -> None:
    """ghsteps - GitHub REST API actions for automation pipelines."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--set", "set_credential", help="Set a single credential (KEY=VALUE)")
def config(set_credential: str | None) -> None:
    """Configure the API token and server.

    Prompts for the token and saves it to ~/.ghsteps/credentials with 600
    permissions. Press Enter to keep the existing value.

    \b
    Set a single credential:
      ghsteps config --set GITHUB_API_TOKEN=<token>
    """
    ensure_config_dir()
    create_default_config()

    if set_credential:
        if "=" not in set_credential:
            click.secho("Error: Use format KEY=VALUE", fg="red")
            sys.exit(1)
        key, value = set_credential.split("=", 1)
        key = key.strip()
        save_credential(key, value.strip())
        click.echo(f"Set {key} in {env.CREDENTIALS_FILE}")
        return

    existing = get_credential("GITHUB_API_TOKEN")
    prompt_text = "GITHUB_API_TOKEN (GitHub token)"
    if existing:
        prompt_text += " [configured]"
    token = click.prompt(prompt_text, default="", hide_input=True, show_default=False)
    if token:
        save_credential("GITHUB_API_TOKEN", token)
        click.echo(f"Saved credentials: {env.CREDENTIALS_FILE}")

    click.echo()
    config_data = load_config_file()
    config_data["server_url"] = click.prompt(
        "GitHub API server URL",
        default=config_data.get("server_url") or DEFAULT_SERVER_URL,
    )

    for key, label in [("repo_owner", "Default repository owner"), ("repo_name", "Default repository name")]:
        value = click.prompt(label, default=config_data.get(key) or "", show_default=False)
        if value:
            config_data[key] = value

    with open(env.CONFIG_FILE, "w") as f:
        yaml.dump(config_data, f, default_flow_style=False)
    click.echo(f"Saved config: {env.CONFIG_FILE}")
    get_settings.cache_clear()


@cli.command("actions")
def list_actions_command() -> None:
    """List available actions."""
    from ghsteps.actions import list_actions

    for action in list_actions():
        click.echo(f"{click.style(action.name, bold=True):<50} {action.method:<6} {action.description}")


@cli.command()
@click.argument("action_name")
@click.option("--param", "-p", "params", multiple=True, help="Action option (KEY=VALUE)")
@click.option("--server-url", help="Override GitHub API server URL")
def call(action_name: str, params: tuple[str, ...], server_url: str | None) -> None:
    """Run a single action and print its result as JSON."""
    from ghsteps.actions import ActionError, get_action
    from ghsteps.github.client import GitHubClient

    require_token()

    try:
        action = get_action(action_name)
        options = action.parse_options(parse_pairs(params))
    except ActionError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    async def _call():
        async with GitHubClient(server_url=server_url) as github:
            return await action.run(github, options)

    result = asyncio.run(_call())
    echo_json(result.to_dict())

    if not result.ok:
        click.secho(f"Error: {result.error}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.argument("method", type=click.Choice(["GET", "POST", "PUT", "PATCH", "DELETE"], case_sensitive=False))
@click.argument("path")
@click.option("--param", "-p", "params", multiple=True, help="Query or body parameter (KEY=VALUE)")
@click.option("--header", "-H", "headers", multiple=True, help="Extra header (Name:Value)")
@click.option("--server-url", help="Override GitHub API server URL")
def request(
    method: str,
    path: str,
    params: tuple[str, ...],
    headers: tuple[str, ...],
    server_url: str | None,
) -> None:
    """Call any REST endpoint and print the response envelope.

    Exits non-zero only if no response could be obtained.
    """
    from ghsteps.github.client import GitHubClient, TransportError

    require_token()
    query_or_body = parse_pairs(params) or None
    extra_headers = parse_headers(headers) or None

    async def _request():
        async with GitHubClient(server_url=server_url) as github:
            return await github.request(method, path, params=query_or_body, headers=extra_headers)

    try:
        envelope = asyncio.run(_request())
    except TransportError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(2)

    echo_json(envelope.to_dict())


@cli.command()
@click.argument("pipeline_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--server-url", help="Override GitHub API server URL")
@click.option("--json", "as_json", is_flag=True, help="Print step results as JSON")
def run(pipeline_file: Path, server_url: str | None, as_json: bool) -> None:
    """Run a pipeline of actions from a YAML file."""
    from ghsteps.github.client import GitHubClient
    from ghsteps.pipeline import Pipeline, PipelineError

    require_token()

    try:
        pipeline = Pipeline.load(pipeline_file)
    except PipelineError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    async def _run():
        async with GitHubClient(server_url=server_url) as github:
            return await pipeline.run(github)

    result = asyncio.run(_run())

    if as_json:
        echo_json(result.results())
    else:
        click.echo(result.format())

    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
