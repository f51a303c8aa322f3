# Resolved search parameters and their validation

import re
from dataclasses import dataclass
from datetime import timezone
from enum import Enum
from typing import Any, Optional, Tuple

from dateutil import parser as date_parser

from .config import ConfigurationError
from .connection import GROUP, SYSTEM, SearchConnection


class TimeParseError(ConfigurationError):
	"""Raised when a timestamp in a time range cannot be parsed."""
	pass


class OutputMode(Enum):
	TEXT = "text"
	JSON = "json"


@dataclass(frozen=True)
class QueryParameters:
	"""Validated, immutable search intent for one invocation."""
	text: str = ""
	system_id: Optional[Any] = None
	group_id: Optional[Any] = None
	min_time: Optional[int] = None
	max_time: Optional[int] = None
	follow: bool = False
	delay_seconds: int = 2
	output_mode: OutputMode = OutputMode.TEXT

	def __post_init__(self):
		if self.follow and self.max_time is not None:
			raise ConfigurationError("End time (-t) does not make sense when following current logs (-f)")
		if self.delay_seconds < 0:
			raise ConfigurationError(f"Delay must be zero or more seconds, got {self.delay_seconds}")
		if self.min_time is not None and self.max_time is not None and self.max_time < self.min_time:
			raise ConfigurationError("End time (-t) is before the start time")

	@property
	def initial_delay(self) -> int:
		"""Delay applied before the first repeat; zero while catching up on history."""
		if self.min_time is not None:
			return 0
		return self.delay_seconds


def parse_timestamp(value: str) -> int:
	"""Parse a human date/time into UTC epoch seconds.

	Values without a zone are taken as local time.
	"""
	text = (value or "").strip()
	if not text:
		raise TimeParseError("Empty timestamp in time range")
	try:
		parsed = date_parser.parse(text)
	except (ValueError, OverflowError) as e:
		raise TimeParseError(f"Cannot parse time \"{text}\": {e}")
	if parsed.tzinfo is None:
		parsed = parsed.astimezone()
	return int(parsed.astimezone(timezone.utc).timestamp())


# HH:MM:SS followed by a -HH:MM offset
_ZONE_OFFSET = re.compile(r"\d{1,2}:\d{2}:\d{2}(\.\d+)?-\d{2}:?\d{2}$")


def split_time_range(value: str) -> Tuple[str, Optional[str]]:
	"""Split RANGE into start and optional end text.

	" - " separates first; otherwise a single "-" does. Values with more
	dashes (ISO dates), or a time with seconds and a
	trailing -HH:MM offset, are one timestamp.
	"""
	text = value.strip()
	if " - " in text:
		start, end = text.split(" - ", 1)
		return start.strip(), end.strip()
	if text.count("-") == 1 and not _ZONE_OFFSET.search(text):
		start, end = text.split("-", 1)
		return start.strip(), end.strip() or None
	return text, None


def parse_time_range(value: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
	if not value:
		return None, None
	start, end = split_time_range(value)
	min_time = parse_timestamp(start)
	max_time = parse_timestamp(end) if end else None
	return min_time, max_time


def build_query_parameters(
	connection: SearchConnection,
	query: Optional[str] = None,
	system: Optional[str] = None,
	group: Optional[str] = None,
	time_range: Optional[str] = None,
	follow: bool = False,
	delay: int = 2,
	json_output: bool = False,
) -> QueryParameters:
	"""Resolve scope names and time bounds into QueryParameters.

	Raises ConfigurationError before any search is issued.
	"""
	min_time, max_time = parse_time_range(time_range)
	if follow and max_time is not None:
		raise ConfigurationError("End time (-t) does not make sense when following current logs (-f)")

	system_id = None
	if system:
		system_id = connection.find_id(SYSTEM, system)
		if system_id is None:
			raise ConfigurationError(f"System \"{system}\" not found")

	group_id = None
	if group:
		group_id = connection.find_id(GROUP, group)
		if group_id is None:
			raise ConfigurationError(f"Group \"{group}\" not found")

	return QueryParameters(
		text=query or "",
		system_id=system_id,
		group_id=group_id,
		min_time=min_time,
		max_time=max_time,
		follow=follow,
		delay_seconds=int(delay),
		output_mode=OutputMode.JSON if json_output else OutputMode.TEXT,
	)
