"""This module defines the 'config' command group."""

import click
from licitasaas.providers.config import ConfigProvider

SECRET_SETTINGS = frozenset({"JWT_SECRET", "GEMINI_API_KEY", "POSTGRES_PASSWORD"})


def render_setting(key: str, value: object, show_secrets: bool = False) -> str:
    """Formats one setting as a `KEY=value` line.

    The value of a secret setting is reduced to its last four characters,
    unless secrets are explicitly shown.

    Args:
        key: The setting name.
        value: The effective value.
        show_secrets: If True, secret values are printed as they are.

    Returns:
        The line to print.
    """
    if show_secrets or key not in SECRET_SETTINGS:
        return f"{key}={value}"
    if value is None:
        return f"{key}=(not set)"
    text = str(value)
    tail = text[-4:] if len(text) >= 8 else ""
    return f"{key}=********{tail}"


@click.group("config")
def config_group() -> None:
    """Groups commands related to configuration."""
    pass


@config_group.command("list")
@click.option("--show-secrets", is_flag=True, help="Show secret values without masking.")
def list_values(show_secrets: bool) -> None:
    """Lists the effective settings, masking secrets by default.

    Args:
        show_secrets: If True, shows secret values without masking.
    """
    config = ConfigProvider.get_config()
    for key, value in config.model_dump().items():
        click.echo(render_setting(key, value, show_secrets))
