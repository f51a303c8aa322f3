import signal
import sys

# Handle Ctrl+C gracefully before any other imports
signal.signal(signal.SIGINT, lambda *_: sys.exit(130))

import time
from typing import Optional

import typer

from .api.client import PapertrailError, get_papertrail_client
from .config import ConfigurationError, resolve_options
from .connection import SearchResult
from .engine import PollingEngine
from .formatting import format_page_json, format_page_text
from .handler import configure_logging
from .params import OutputMode, QueryParameters, build_query_parameters

EXAMPLES = """\b
Examples:
  papertrail -f
  papertrail something
  papertrail 1.2.3 Failure
  papertrail -s ns1 "connection refused"
  papertrail -f "(www OR db) (nginx OR pgsql) -accepted"
  papertrail -f -g Production "(nginx OR pgsql) -accepted"
  papertrail -t "2024-01-05 10:00 - 2024-01-05 11:00" timeout

More: https://papertrailapp.com/
"""

app = typer.Typer(add_completion=False)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _error(message):
	typer.echo(typer.style(f"Error: {message}", fg=typer.colors.RED), err=True)


def _as_delay(value) -> int:
	try:
		return int(value)
	except (TypeError, ValueError):
		raise ConfigurationError(f"Delay must be a whole number of seconds, got {value!r}")


def emit_page(page: SearchResult, params: QueryParameters):
	if params.output_mode is OutputMode.JSON:
		typer.echo(format_page_json(page))
	else:
		for line in format_page_text(page):
			typer.echo(line)
	sys.stdout.flush()


@app.command(epilog=EXAMPLES, context_settings=CONTEXT_SETTINGS)
def papertrail(
	query: str = typer.Argument("", help="Search query; matches everything when omitted"),
	follow: bool = typer.Option(False, "--follow", "-f", help="Continue running and print new events (off)"),
	delay: Optional[int] = typer.Option(None, "--delay", "-d", metavar="SECONDS", help="Delay between refresh (2)"),
	configfile: Optional[str] = typer.Option(None, "--configfile", "-c", metavar="PATH", help="Path to config (~/.papertrail.yml)"),
	system: Optional[str] = typer.Option(None, "--system", "-s", help="System to search"),
	group: Optional[str] = typer.Option(None, "--group", "-g", help="Group to search"),
	json_output: bool = typer.Option(False, "--json", "-j", help="Output raw json data"),
	time_range: Optional[str] = typer.Option(None, "--time", "-t", metavar="RANGE", help="Retrieve logs after a start timestamp or between two timestamps (START-END)"),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Print request and polling details to stderr"),
):
	"""papertrail - command-line tail and search for Papertrail log management service."""
	logger = configure_logging(verbose)
	try:
		options = resolve_options(
			configfile,
			follow=follow,
			delay=delay,
			system=system,
			group=group,
			json=json_output,
			time=time_range,
		)
		connection = get_papertrail_client(options.get("token"))
		params = build_query_parameters(
			connection,
			query=query,
			system=options.get("system"),
			group=options.get("group"),
			time_range=options.get("time"),
			follow=bool(options.get("follow")),
			delay=_as_delay(options.get("delay")),
			json_output=bool(options.get("json")),
		)
		logger.debug("Resolved %s", params)
		PollingEngine(connection, params, emit=emit_page, sleep=time.sleep).run()
	except ConfigurationError as e:
		_error(e)
		raise typer.Exit(1)
	except PapertrailError as e:
		_error(e)
		raise typer.Exit(1)


def main():
	try:
		app()
	except typer.Exit:
		raise
	except Exception as e:
		typer.echo(typer.style(
			f"Fatal error: {type(e).__name__}: {e}",
			fg=typer.colors.RED
		), err=True)
		sys.exit(1)

if __name__ == "__main__":
	main()
