# Rendering of events and pages for terminal output

import json
from typing import Any, Dict, List

from .connection import SearchResult


def format_event(event: Dict[str, Any]) -> str:
	"""Render one event as "<time> <source> <program>: <message>"."""
	timestamp = event.get("display_received_at") or event.get("received_at") or ""
	source = event.get("source_name") or event.get("hostname") or ""
	program = event.get("program") or ""
	message = event.get("message") or ""
	parts = [part for part in (timestamp, source) if part]
	if program:
		parts.append(f"{program}:")
	if message:
		parts.append(message)
	return " ".join(parts)


def format_page_text(page: SearchResult) -> List[str]:
	return [format_event(event) for event in page.events]


def format_page_json(page: SearchResult) -> str:
	"""Render the raw response of a page as one JSON document."""
	data = page.data or {"events": page.events, "min_id": page.min_id, "max_id": page.max_id}
	return json.dumps(data, default=str)
