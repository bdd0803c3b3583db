"""Main CLI entry point.

    ancestry decode 10-0-0-2400000000000000
    ancestry explore d9-0-4-100000000000000 --depth 3
"""

from __future__ import annotations

import click

from ancestry import __version__
from ancestry.cli.config_cmd import config
from ancestry.cli.explore_cmd import explore_cmd, parents_cmd
from ancestry.cli.handle_cmd import decode_cmd, encode_cmd, literal_cmd
from ancestry.cli.helpers import print_error
from ancestry.config import get_config
from ancestry.foundation.errors import ConfigError
from ancestry.foundation.logging import configure_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", is_flag=True, help="Also write logs to .ancestry/logs/")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, debug: bool, log_file: bool) -> None:
    """Ancestry - explore the provenance of build artifacts.

    \b
    Decode a handle:

        ancestry decode d9-0-4-100000000000000

    \b
    Reveal what produced it:

        ancestry explore d9-0-4-100000000000000 --url 127.0.0.1:9090
    """
    configure_logging(debug=debug, persist=log_file)

    # Config errors surface here rather than inside every command
    if ctx.invoked_subcommand != "config":
        try:
            get_config()
        except ConfigError as e:
            print_error(e)
            ctx.exit(1)


main.add_command(decode_cmd)
main.add_command(encode_cmd)
main.add_command(literal_cmd)
main.add_command(parents_cmd)
main.add_command(explore_cmd)
main.add_command(config)
