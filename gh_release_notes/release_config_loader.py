"""Locate, parse and validate the release configuration."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .config_converter import normalize_config
from .constants import DEFAULT_CONFIG_PATHS, DEFAULT_FALLBACK_CONFIG
from .content_loader import ContentLoader, LocalContentLoader, source_filename
from .exceptions import ConfigurationError
from .models import ReleaseConfig

logger = logging.getLogger(__name__)


def parse_config_string(raw: str, filename: str) -> Any:
	"""Parse YAML for ``.yml``/``.yaml`` files and JSON otherwise.

	Raises:
		ConfigurationError: If the content cannot be parsed.
	"""
	try:
		if filename.endswith((".yml", ".yaml")):
			return yaml.safe_load(raw)
		return json.loads(raw)
	except (yaml.YAMLError, json.JSONDecodeError) as e:
		raise ConfigurationError(f"Failed to parse config {filename}: {e}") from e


def find_default_config(base_dir: Path | None = None) -> Path | None:
	base_dir = base_dir or Path.cwd()
	for relative_path in DEFAULT_CONFIG_PATHS:
		path = base_dir / relative_path
		if path.is_file():
			return path
	return None


def load_release_config(
	source: str | None = None,
	loader: ContentLoader | None = None,
	base_dir: Path | None = None,
) -> tuple[ReleaseConfig, list[str]]:
	"""Load the release config and return it with any conversion warnings.

	Without an explicit ``source`` the first existing default path is used,
	falling back to a built-in config that mimics GitHub's generated notes.

	Raises:
		ConfigurationError: If the config cannot be parsed or validated.
		ContentLoadError: If an explicit source cannot be loaded.
	"""
	if source:
		logger.debug("Loading config from %s", source)
		raw_config = parse_config_string((loader or LocalContentLoader(base_dir)).load(source), source_filename(source))
	else:
		path = find_default_config(base_dir)
		if path:
			logger.debug("Using %s", path)
			raw_config = parse_config_string(path.read_text(encoding="utf-8"), path.name)
		else:
			logger.debug("No local config found, using default fallback config")
			raw_config = dict(DEFAULT_FALLBACK_CONFIG)

	config, warnings = normalize_config(raw_config)
	return ReleaseConfig.from_dict(config), warnings
