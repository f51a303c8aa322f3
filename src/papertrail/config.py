# Configuration loading for papertrail

import os
from typing import Any, Dict, Optional

import yaml

# Lazy load dotenv - only when config is first accessed
_dotenv_loaded = False

CONFIG_FILENAME = ".papertrail.yml"

OPTION_DEFAULTS = {
	"follow": False,
	"delay": 2,
	"system": None,
	"group": None,
	"json": False,
	"time": None,
	"token": None,
}


class ConfigurationError(Exception):
	"""Raised when options are missing, contradictory or unresolvable."""
	pass


def _getenv(name, default):
	value = os.getenv(name)
	return value if value else default


class PapertrailConfig:
	"""Loads API settings from environment variables and provides defaults."""
	def __init__(self):
		self.api_token = _getenv("PAPERTRAIL_API_TOKEN", None)
		self.api_url = _getenv("PAPERTRAIL_API_URL", "https://papertrailapp.com/api/v1")
		self.timeout = int(_getenv("PAPERTRAIL_TIMEOUT", "30"))


def load_config() -> PapertrailConfig:
	"""Return a config object with all settings loaded."""
	global _dotenv_loaded
	if not _dotenv_loaded:
		from dotenv import load_dotenv, find_dotenv
		dotenv_path = os.getenv("DOTENV_PATH")
		if dotenv_path:
			# Explicit path wins over values already in the environment
			load_dotenv(dotenv_path, override=True)
		else:
			dotenv_path = find_dotenv(usecwd=True)
			if dotenv_path:
				load_dotenv(dotenv_path)
		_dotenv_loaded = True
	return PapertrailConfig()


def find_configfile() -> Optional[str]:
	"""Return ./.papertrail.yml or ~/.papertrail.yml, whichever exists first."""
	for candidate in (os.path.abspath(CONFIG_FILENAME), os.path.expanduser(f"~/{CONFIG_FILENAME}")):
		if os.path.isfile(candidate):
			return candidate
	return None


def load_configfile(path: str) -> Dict[str, Any]:
	"""Read a YAML option file into a dict keyed by option name."""
	try:
		with open(path, "r", encoding="utf-8") as f:
			data = yaml.safe_load(f)
	except OSError as e:
		raise ConfigurationError(f"Cannot read config file {path}: {e.strerror}")
	except yaml.YAMLError as e:
		raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")
	if data is None:
		return {}
	if not isinstance(data, dict):
		raise ConfigurationError(f"Config file {path} must contain a mapping of options")
	# Keys may be written as Ruby-style symbols (":follow")
	return {str(key).lstrip(":"): value for key, value in data.items()}


def resolve_options(configfile: Optional[str] = None, **flags) -> Dict[str, Any]:
	"""Merge defaults, the discovered file, an explicit file and command-line flags.

	Flags left as None (or False for switches) do not override file values.
	"""
	options: Dict[str, Any] = dict(OPTION_DEFAULTS)
	discovered = find_configfile()
	if discovered:
		options.update(load_configfile(discovered))
	if configfile:
		options.update(load_configfile(os.path.expanduser(configfile)))
	for key, value in flags.items():
		if value is None or value is False:
			continue
		options[key] = value
	return options
