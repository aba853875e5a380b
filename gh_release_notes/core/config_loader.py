import tomllib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from ..constants import GITHUB_API_URL, REQUEST_TIMEOUT
from .auth import resolve_token
from .config import GeneratorOptions, GitHubConfig, ReleaseNotesConfig


class ConfigLoader(ABC):
	@abstractmethod
	def load(self) -> ReleaseNotesConfig:
		"""Load configuration from source."""
		pass


class DictConfigLoader(ConfigLoader):
	"""Load from dictionary (for programmatic usage)."""

	def __init__(self, config_dict: dict[str, Any]):
		self.config_dict = config_dict

	def load(self) -> ReleaseNotesConfig:
		return ReleaseNotesConfig(
			github=GitHubConfig(
				token=resolve_token(self.config_dict.get("github_token")),
				api_url=self.config_dict.get("github_api_url", GITHUB_API_URL),
				timeout=self.config_dict.get("timeout", REQUEST_TIMEOUT),
			),
			options=GeneratorOptions(
				prev_tag=self.config_dict.get("prev_tag"),
				tag=self.config_dict.get("tag"),
				target=self.config_dict.get("target"),
				preview=self.config_dict.get("preview", False),
				sponsor_fetch_mode=self.config_dict.get("sponsor_fetch_mode", "auto"),
				include_new_contributors=self.config_dict.get("include_new_contributors"),
				extended_output=self.config_dict.get("extended_output", False),
			),
			config_source=self.config_dict.get("config"),
		)


class EnvConfigLoader(ConfigLoader):
	"""Load from environment variables and an optional .env file."""

	def __init__(self, env_path: str = ".env"):
		self.env_path = env_path

	def load(self) -> ReleaseNotesConfig:
		config = dotenv_values(self.env_path)

		return ReleaseNotesConfig(
			github=GitHubConfig(
				token=resolve_token(env_path=self.env_path),
				api_url=config.get("GITHUB_API_URL") or GITHUB_API_URL,
				timeout=float(config.get("GITHUB_TIMEOUT") or REQUEST_TIMEOUT),
			),
			options=GeneratorOptions(
				sponsor_fetch_mode=config.get("SPONSOR_FETCH_MODE") or "auto",
			),
			config_source=config.get("RELEASE_NOTES_CONFIG"),
		)


class TomlConfigLoader(ConfigLoader):
	"""Load from a TOML settings file."""

	DEFAULT_CONFIG_PATH = Path.home() / ".gh-release-notes" / "config.toml"

	def __init__(self, config_path: Path | str | None = None):
		"""Initialize TOML config loader.

		Args:
			config_path: Path to config file. If None, uses DEFAULT_CONFIG_PATH.
		"""
		if config_path is None:
			self.config_path = self.DEFAULT_CONFIG_PATH
		else:
			self.config_path = Path(config_path)

	def load(self) -> ReleaseNotesConfig:
		"""Load configuration from TOML file.

		A missing ``github.token`` is resolved from the environment or the
		GitHub CLI.

		Raises:
			FileNotFoundError: If config file doesn't exist
			AuthenticationError: If no token can be found
		"""
		if not self.config_path.exists():
			raise FileNotFoundError(
				f"Config file not found at {self.config_path}. "
				f"Create it or use --settings to specify a different location."
			)

		with open(self.config_path, "rb") as f:
			config = tomllib.load(f)

		github_config = config.get("github", {})
		generate_config = config.get("generate", {})

		return ReleaseNotesConfig(
			github=GitHubConfig(
				token=resolve_token(github_config.get("token")),
				api_url=github_config.get("api_url", GITHUB_API_URL),
				timeout=github_config.get("timeout", REQUEST_TIMEOUT),
			),
			options=GeneratorOptions(
				sponsor_fetch_mode=generate_config.get("sponsor_fetch_mode", "auto"),
				include_new_contributors=generate_config.get("include_new_contributors"),
			),
			config_source=generate_config.get("config"),
		)


def load_settings(config_path: Path | str | None = None) -> ReleaseNotesConfig:
	"""Use the TOML settings file if there is one, the environment otherwise."""
	loader = TomlConfigLoader(config_path)
	if config_path is None and not loader.config_path.exists():
		return EnvConfigLoader().load()
	return loader.load()
