# Polling engine: one-shot, bounded and unbounded tails over a search connection

import logging
import time
from enum import Enum
from typing import Callable, Optional

from .connection import SearchConnection, SearchResult
from .params import QueryParameters

logger = logging.getLogger(__name__)


class ExecutionMode(Enum):
	ONE_SHOT = "one_shot"
	BOUNDED_TAIL = "bounded_tail"
	UNBOUNDED_TAIL = "unbounded_tail"


class Decision(Enum):
	CONTINUE = "continue"
	DONE = "done"


def select_mode(params: QueryParameters) -> ExecutionMode:
	if params.max_time is not None:
		return ExecutionMode.BOUNDED_TAIL
	if params.follow or params.min_time is not None:
		return ExecutionMode.UNBOUNDED_TAIL
	return ExecutionMode.ONE_SHOT


class TerminationPolicy:
	"""Decides after each page whether the requested range is covered."""

	def __init__(self, max_time: Optional[int] = None):
		self.max_time = max_time

	def evaluate(self, reached_max_time: int) -> Decision:
		# Empty pages are judged on time alone.
		if self.max_time is None:
			return Decision.CONTINUE
		if reached_max_time >= self.max_time:
			return Decision.DONE
		return Decision.CONTINUE


class PollingEngine:
	"""Drives sequential searches until the mode's stop condition holds.

	`emit` receives each page; `sleep` is called between polls. Both are
	injectable so the loop can run without real time passing.
	"""

	def __init__(
		self,
		connection: SearchConnection,
		params: QueryParameters,
		emit: Callable[[SearchResult, QueryParameters], None],
		sleep: Callable[[float], None] = time.sleep,
	):
		self.connection = connection
		self.params = params
		self.emit = emit
		self.sleep = sleep
		self.mode = select_mode(params)
		self.policy = TerminationPolicy(params.max_time)
		self.cursor: Optional[str] = None
		self.high_water: Optional[int] = params.min_time
		self.catching_up = params.min_time is not None

	@property
	def current_delay(self) -> int:
		if self.catching_up:
			return 0
		return self.params.delay_seconds

	def fetch(self) -> SearchResult:
		params = self.params
		logger.debug("Searching %r with cursor=%s", params.text, self.cursor)
		return self.connection.search(
			params.text,
			system_id=params.system_id,
			group_id=params.group_id,
			min_time=params.min_time,
			max_time=params.max_time,
			min_id=self.cursor,
		)

	def advance(self, page: SearchResult):
		"""Move the cursor and high-water mark forward, never backwards."""
		if page.max_id is not None and (self.cursor is None or _id_after(page.max_id, self.cursor)):
			self.cursor = page.max_id
		if self.high_water is None or page.reached_max_time > self.high_water:
			self.high_water = page.reached_max_time
		# A bounded range runs back-to-back until its end time ends the loop.
		if self.catching_up and not page.events and self.mode is ExecutionMode.UNBOUNDED_TAIL:
			logger.debug("Caught up at %s, delay is now %ss", self.high_water, self.params.delay_seconds)
			self.catching_up = False

	def step(self) -> Decision:
		"""Run one iteration: search, emit, advance, then decide."""
		page = self.fetch()
		logger.debug("Received %d events, max_id=%s, reached_max_time=%s",
			len(page.events), page.max_id, page.reached_max_time)
		self.emit(page, self.params)
		self.advance(page)
		return self.policy.evaluate(self.high_water)

	def run(self) -> int:
		"""Run until done and return the number of pages fetched.

		Under follow or an open-ended start time this never returns.
		"""
		logger.debug("Running in %s mode", self.mode.value)
		if self.mode is ExecutionMode.ONE_SHOT:
			self.emit(self.fetch(), self.params)
			return 1

		pages = 0
		while True:
			decision = self.step()
			pages += 1
			if decision is Decision.DONE:
				logger.debug("Reached end time %s after %d pages", self.params.max_time, pages)
				return pages
			delay = self.current_delay
			if delay:
				logger.debug("Sleeping %ss", delay)
				self.sleep(delay)


def _id_after(candidate: str, current: str) -> bool:
	# Event IDs are numeric strings; compare numerically when possible.
	try:
		return int(candidate) > int(current)
	except (TypeError, ValueError):
		return candidate != current
