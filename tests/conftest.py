import os
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
	sys.path.insert(0, SRC_DIR)

from papertrail import config
from papertrail.connection import SearchConnection, SearchResult


class FakeConnection(SearchConnection):
	"""Scripted connection: returns queued pages and records every call."""

	def __init__(self, pages=None, systems=None, groups=None):
		self.pages = list(pages or [])
		self.ids = {"system": dict(systems or {}), "group": dict(groups or {})}
		self.searches = []
		self.lookups = []

	def find_id(self, kind, name):
		self.lookups.append((kind, name))
		return self.ids[kind].get(name)

	def search(self, query, system_id=None, group_id=None, min_time=None, max_time=None, min_id=None):
		self.searches.append({
			"query": query,
			"system_id": system_id,
			"group_id": group_id,
			"min_time": min_time,
			"max_time": max_time,
			"min_id": min_id,
		})
		if not self.pages:
			raise AssertionError("FakeConnection ran out of scripted pages")
		return self.pages.pop(0)


def make_page(messages, reached_max_time, max_id=None):
	events = [
		{"id": f"{reached_max_time}-{i}", "message": message, "source_name": "web1", "program": "app"}
		for i, message in enumerate(messages)
	]
	return SearchResult(
		events=events,
		reached_max_time=reached_max_time,
		max_id=max_id,
		data={"events": events, "max_id": max_id},
	)


@pytest.fixture
def fake_connection():
	return FakeConnection()


@pytest.fixture
def isolated_config(monkeypatch, tmp_path):
	"""Run from an empty directory with no home config or token in the environment."""
	home = tmp_path / "home"
	work = tmp_path / "work"
	home.mkdir()
	work.mkdir()
	monkeypatch.setenv("HOME", str(home))
	monkeypatch.chdir(work)
	monkeypatch.setattr(config, "_dotenv_loaded", True)
	for key in ("PAPERTRAIL_API_TOKEN", "PAPERTRAIL_API_URL", "PAPERTRAIL_TIMEOUT", "DOTENV_PATH"):
		monkeypatch.delenv(key, raising=False)
	return home, work
