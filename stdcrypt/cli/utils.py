import logging

import click

logger = logging.getLogger("cli")


def _warn_empty_password():
    click.echo(
        click.style(
            "WARNING: password is empty. The empty user password is common, "
            "but make sure this is what you intended.",
            bold=True,
        ),
        err=True,
    )


def parse_hex(ctx, param, value):
    # click callback for options and arguments taking hex-encoded bytes
    if value is None:
        return None
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a valid hex string.")
