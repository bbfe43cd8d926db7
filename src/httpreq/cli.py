"""
httpreq command-line interface.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging

import click
from rich.console import Console
from rich.markup import escape

from httpreq import __version__
from httpreq.config import Settings
from httpreq.errors import HttpReqError
from httpreq.logging_config import setup_logging
from httpreq.render import ResponseRenderer
from httpreq.request import build_descriptor
from httpreq.runner import run


logger = logging.getLogger(__name__)

err_console = Console(stderr=True, soft_wrap=True)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "-help", "--help"]}

BOOL_FLAGS = ("-follow", "--follow", "-raw", "--raw", "-verbose", "--verbose")


class BoolFlagCommand(click.Command):
    """Command that also accepts '-flag=true' and '-flag=false' for boolean flags.

    A bare flag never takes a value, so it cannot swallow a following
    header argument.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        normalized = []
        for index, arg in enumerate(args):
            if arg == "--":
                normalized.extend(args[index:])
                break
            name, sep, value = arg.partition("=")
            if sep and name in BOOL_FLAGS:
                try:
                    enabled = click.BOOL.convert(value, None, ctx)
                except click.BadParameter:
                    raise click.BadParameter(
                        f"'{value}' is not a valid boolean", ctx=ctx, param_hint=f"'{name}'"
                    )
                if enabled:
                    normalized.append(name)
                continue
            normalized.append(arg)
        return super().parse_args(ctx, normalized)


def fail(error: HttpReqError) -> None:
    """Report a fatal error on stderr and exit with status 1."""
    logger.debug("%s error: %s", error.kind.value, error, exc_info=error.__cause__)
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    raise SystemExit(1)


@click.command("httpreq", cls=BoolFlagCommand, context_settings=CONTEXT_SETTINGS)
@click.option("-url", "--url", "url", default="", help="The URL to make the request to")
@click.option("-method", "--method", "method", default="GET", help="The HTTP method to use")
@click.option("-file", "--file", "body_file", default="",
              help="The name of a file to use as the request body")
@click.option("-follow", "--follow", "follow", is_flag=True, default=False,
              help="Whether to follow redirects (also -follow=true|false)")
@click.option("-auth", "--auth", "auth", default="",
              help="The username and password for basic authentication in the format 'username:password'")
@click.option("-raw", "--raw", "raw", is_flag=True, default=False,
              help="Print the raw body when it is not valid JSON")
@click.option("-verbose", "--verbose", "verbose", is_flag=True, default=False,
              help="Log request details to stderr")
@click.version_option(__version__, "-version", "--version", prog_name="httpreq")
@click.argument("headers", nargs=-1)
@click.pass_context
def main(ctx: click.Context, url: str, method: str, body_file: str, follow: bool,
         auth: str, raw: bool, verbose: bool, headers: tuple[str, ...]):
    """Make a single HTTP request and print the response.

    Trailing arguments are request headers in 'Name: Value' format. A JSON
    response body is pretty-printed.

    \b
    Examples:
        httpreq -url https://api.example.com/users
        httpreq -url https://api.example.com/users -method POST -file user.json "Content-Type: application/json"
        httpreq -url https://api.example.com/private -auth "user:pass"
        httpreq -url http://example.com/old -follow
    """
    if not url:
        click.echo(ctx.get_help())
        ctx.exit(1)

    try:
        settings = Settings.from_env()
    except HttpReqError as e:
        fail(e)

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
    )

    try:
        descriptor = build_descriptor(
            url=url,
            method=method,
            body_file=body_file or None,
            follow_redirects=follow,
            auth=auth or None,
            headers=headers,
        )
        run(descriptor, settings, renderer=ResponseRenderer(raw_on_error=raw))
    except HttpReqError as e:
        fail(e)


if __name__ == "__main__":
    main()
