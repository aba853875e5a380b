"""Convert GitHub's release.yml format into the tool-native config format."""

import logging
from typing import Any

from pydantic import ValidationError

from .constants import DEFAULT_RELEASE_TEMPLATE, GITHUB_STYLE_CATEGORY_TEMPLATE, GITHUB_STYLE_CHANGE_TEMPLATE
from .exceptions import ConfigurationError
from .models.release_config import PlatformNativeConfig

logger = logging.getLogger(__name__)


def is_platform_native_config(config: Any) -> bool:
	"""Return True if the config has a ``changelog`` mapping (GitHub release.yml)."""
	return isinstance(config, dict) and isinstance(config.get("changelog"), dict)


def convert_platform_config(config: PlatformNativeConfig) -> tuple[dict[str, Any], list[str]]:
	"""Convert a validated release.yml config.

	Returns the tool-native config dict and a list of warnings for parts that
	could not be converted losslessly.
	"""
	converted: dict[str, Any] = {}
	warnings: list[str] = []
	changelog = config.changelog

	if changelog.exclude and changelog.exclude.labels:
		converted["exclude-labels"] = list(changelog.exclude.labels)
	if changelog.exclude and changelog.exclude.authors:
		converted["exclude-contributors"] = list(changelog.exclude.authors)

	if changelog.categories:
		categories = []
		for category in changelog.categories:
			# a "*" category becomes a category without labels, which collects
			# every PR not matched by another category
			converted_category: dict[str, Any] = {"title": category.title}
			if category.labels and not category.is_wildcard:
				converted_category["labels"] = list(category.labels)
			categories.append(converted_category)

			if category.exclude and (category.exclude.labels or category.exclude.authors):
				message = (
					f'Category "{category.title}" has exclusions which are not supported per category. '
					"Only global exclusions are applied."
				)
				if category.is_wildcard:
					message += " As a wildcard category it only receives otherwise uncategorized PRs."
				warnings.append(message)
		converted["categories"] = categories

	converted["template"] = DEFAULT_RELEASE_TEMPLATE
	converted["change-template"] = GITHUB_STYLE_CHANGE_TEMPLATE
	converted["category-template"] = GITHUB_STYLE_CATEGORY_TEMPLATE
	return converted, warnings


def normalize_config(config: Any) -> tuple[Any, list[str]]:
	"""Return the config in tool-native shape plus conversion warnings.

	Tool-native and unrecognised shapes pass through unchanged.

	Raises:
		ConfigurationError: If a release.yml config fails validation.
	"""
	if not is_platform_native_config(config):
		return config, []

	logger.debug("Detected GitHub release.yml format, converting")
	try:
		platform_config = PlatformNativeConfig.model_validate(config)
	except ValidationError as e:
		raise ConfigurationError(f"Invalid release.yml config: {e}") from e

	converted, warnings = convert_platform_config(platform_config)
	for warning in warnings:
		logger.warning(warning)
	return converted, warnings
