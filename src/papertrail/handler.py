# Logging handler that writes diagnostics to stderr for --verbose

import logging

import typer

_LEVEL_COLORS = {
	"DEBUG": typer.colors.BLUE,
	"INFO": typer.colors.BLUE,
	"WARNING": typer.colors.YELLOW,
	"ERROR": typer.colors.RED,
	"CRITICAL": typer.colors.RED,
}


class EchoHandler(logging.Handler):
	"""Logging handler that echoes styled records to stderr."""

	def __init__(self, level=logging.DEBUG):
		super().__init__(level)
		self.setFormatter(logging.Formatter("[%(name)s] %(message)s"))

	def emit(self, record):
		try:
			message = self.format(record)
			color = _LEVEL_COLORS.get(record.levelname, typer.colors.BLUE)
			typer.echo(typer.style(message, fg=color), err=True)
		except Exception:
			self.handleError(record)


def configure_logging(verbose: bool) -> logging.Logger:
	"""Attach a single EchoHandler to the package logger."""
	logger = logging.getLogger("papertrail")
	logger.handlers = [EchoHandler()]
	logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
	logger.propagate = False
	return logger
