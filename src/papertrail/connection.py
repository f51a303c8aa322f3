# Search connection port and page type for papertrail

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SYSTEM = "system"
GROUP = "group"


@dataclass
class SearchResult:
	"""One page of events returned by a search."""
	events: List[Dict[str, Any]]
	reached_max_time: int
	min_id: Optional[str] = None
	max_id: Optional[str] = None
	data: Dict[str, Any] = field(default_factory=dict)


class SearchConnection(ABC):
	"""Resolves scope names and executes single bounded searches.

	Implementations either return a result or raise; the polling engine
	never retries a failed call.
	"""

	@abstractmethod
	def find_id(self, kind: str, name: str) -> Optional[Any]:
		"""Return the ID for a named system or group, or None if unknown."""

	@abstractmethod
	def search(
		self,
		query: str,
		system_id=None,
		group_id=None,
		min_time: Optional[int] = None,
		max_time: Optional[int] = None,
		min_id: Optional[str] = None,
	) -> SearchResult:
		"""Execute exactly one search and return the resulting page."""
