# Papertrail API client - using stdlib urllib for fast imports

import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from ..config import ConfigurationError, load_config
from ..connection import GROUP, SYSTEM, SearchConnection, SearchResult

logger = logging.getLogger(__name__)


class PapertrailError(Exception):
	"""Base exception for Papertrail API errors with user-friendly messages."""
	pass


class ConnectionFailedError(PapertrailError):
	"""Raised when the Papertrail API is not reachable."""
	pass


class AuthenticationError(PapertrailError):
	"""Raised when the API token is rejected."""
	pass


class NotFoundError(PapertrailError):
	"""Raised when an API path does not exist."""
	pass


class QueryError(PapertrailError):
	"""Raised when the service rejects a search or returns an unreadable body."""
	pass


_LIST_PATHS = {
	SYSTEM: "/systems.json",
	GROUP: "/groups.json",
}


def _to_epoch(value: Any) -> Optional[int]:
	if value is None or value == "":
		return None
	if isinstance(value, (int, float)):
		return int(value)
	try:
		return int(date_parser.isoparse(str(value)).timestamp())
	except (ValueError, OverflowError):
		return None


def reached_time(data: Dict[str, Any], events: List[Dict[str, Any]]) -> int:
	"""High-water time of a page: latest of max_time_at and the last event.

	A page carrying neither covered the window up to now.
	"""
	marks = [_to_epoch(data.get("max_time_at"))]
	if events:
		marks.append(_to_epoch(events[-1].get("received_at")))
	marks = [mark for mark in marks if mark is not None]
	if marks:
		return max(marks)
	return int(time.time())


class PapertrailClient(SearchConnection):
	"""Minimal Papertrail API client using stdlib urllib."""

	def __init__(self, token, base_url="https://papertrailapp.com/api/v1", timeout=30):
		self.base_url = base_url.rstrip("/")
		self.timeout = timeout
		self.headers = {
			"X-Papertrail-Token": token,
			"Accept": "application/json",
		}

	def _request(self, path, params=None):
		"""Make a GET request to the API and decode the JSON body."""
		url = f"{self.base_url}{path}"
		if params:
			url += "?" + urllib.parse.urlencode(params)
		req = urllib.request.Request(url, headers=self.headers, method="GET")
		try:
			with urllib.request.urlopen(req, timeout=self.timeout) as resp:
				raw = resp.read().decode("utf-8")
		except urllib.error.HTTPError as e:
			if e.code in (401, 403):
				raise AuthenticationError(f"Authentication failed (HTTP {e.code})")
			if e.code == 404:
				raise NotFoundError(f"Not found: {path}")
			raise QueryError(f"Papertrail error: HTTP {e.code} - {e.reason}")
		except urllib.error.URLError as e:
			raise ConnectionFailedError(f"Cannot connect: {e.reason}")
		if not raw:
			return {}
		try:
			return json.loads(raw)
		except ValueError:
			raise QueryError(f"Papertrail returned an unreadable response for {path}")

	def find_id(self, kind, name):
		"""Resolve a system or group name; exact, then case-insensitive, then hostname."""
		path = _LIST_PATHS.get(kind)
		if path is None:
			raise ValueError(f"Unknown kind: {kind}")
		items = self._request(path) or []
		if not isinstance(items, list):
			raise QueryError(f"Papertrail {kind} list is {type(items).__name__}, expected list")
		for item in items:
			if item.get("name") == name:
				return item.get("id")
		lowered = name.lower()
		for item in items:
			if str(item.get("name", "")).lower() == lowered:
				return item.get("id")
		if kind == SYSTEM:
			for item in items:
				if item.get("hostname") == name:
					return item.get("id")
		return None

	def search(self, query, system_id=None, group_id=None, min_time=None, max_time=None, min_id=None):
		params = {}
		if query:
			params["q"] = query
		if system_id is not None:
			params["system_id"] = system_id
		if group_id is not None:
			params["group_id"] = group_id
		if min_time is not None:
			params["min_time"] = min_time
		if max_time is not None:
			params["max_time"] = max_time
		if min_id is not None:
			params["min_id"] = min_id
		logger.debug("GET /events/search.json %s", params)
		data = self._request("/events/search.json", params)
		if not isinstance(data, dict):
			raise QueryError(f"Papertrail search returned {type(data).__name__}")
		events = data.get("events") or []
		return SearchResult(
			events=events,
			reached_max_time=reached_time(data, events),
			min_id=data.get("min_id"),
			max_id=data.get("max_id"),
			data=data,
		)


def get_papertrail_client(token=None):
	"""Build a client from config; an explicit token wins over the environment."""
	cfg = load_config()
	token = token or cfg.api_token
	if not token:
		raise ConfigurationError(
			"No API token configured.\n"
			"Set PAPERTRAIL_API_TOKEN or add \"token\" to .papertrail.yml."
		)
	return PapertrailClient(
		token=token,
		base_url=cfg.api_url,
		timeout=cfg.timeout,
	)
