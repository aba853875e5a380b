"""Load config and template sources from disk, HTTPS or a GitHub package URL.

Supported locators:

- ``path/to/file.yml`` (relative to the working directory)
- ``https://example.com/release-drafter.yml``
- ``pkg:github/owner/repo@ref?checksum=sha256:<hex>#path/to/file.yml``
"""

import hashlib
import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import parse_qsl

import requests
from packageurl import PackageURL

from .constants import GITHUB_API_URL, REQUEST_TIMEOUT, USER_AGENT
from .core.auth import resolve_token
from .exceptions import ChecksumError, ContentLoadError, ContentSizeError, GitHubAPIError
from .github_client import GitHubClient

logger = logging.getLogger(__name__)

MAX_CONTENT_SIZE = 1024 * 1024
CHECKSUM_ALGORITHMS = ("sha1", "sha256", "sha512")


class ContentLoader(Protocol):
	def load(self, source: str) -> str: ...


class LocalContentLoader:
	def __init__(self, base_dir: Path | None = None):
		self.base_dir = base_dir

	def load(self, source: str) -> str:
		path = (self.base_dir or Path.cwd()) / Path(source).expanduser()
		logger.debug("Reading %s", path)
		try:
			return path.read_text(encoding="utf-8")
		except FileNotFoundError as e:
			raise ContentLoadError(f"Content file not found: {path}") from e
		except OSError as e:
			raise ContentLoadError(f"Failed to read content file {path}: {e}") from e


class HTTPSContentLoader:
	def __init__(self, timeout: float = REQUEST_TIMEOUT, max_size: int = MAX_CONTENT_SIZE):
		self.timeout = timeout
		self.max_size = max_size

	def load(self, source: str) -> str:
		if not source.startswith("https://"):
			raise ContentLoadError("URL must use HTTPS protocol")

		logger.debug("Fetching %s", source)
		try:
			response = requests.get(source, headers={"User-Agent": USER_AGENT}, timeout=self.timeout)
		except requests.Timeout as e:
			raise ContentLoadError(f"Request timeout after {self.timeout}s: {source}") from e
		except requests.RequestException as e:
			raise ContentLoadError(f"Failed to fetch content from {source}: {e}") from e

		if not response.ok:
			raise ContentLoadError(f"Failed to fetch content: HTTP {response.status_code} {response.reason}")
		if len(response.content) > self.max_size:
			raise ContentSizeError(f"Content file too large (max {self.max_size} bytes): {source}")

		logger.debug("Fetched %d bytes from %s", len(response.content), source)
		return response.text


def parse_checksums(value: str) -> list[tuple[str, str]]:
	"""Parse a ``checksum`` qualifier.

	Examples:
	'sha256:ABC,sha1:def' -> [('sha256', 'abc'), ('sha1', 'def')]
	"""
	checksums = []
	for item in value.split(","):
		algorithm, _, digest = item.partition(":")
		if not algorithm or not digest:
			raise ChecksumError(f"Invalid checksum format: {item}. Expected algorithm:hash")
		if algorithm not in CHECKSUM_ALGORITHMS:
			raise ChecksumError(f"Unsupported checksum algorithm: {algorithm}")
		checksums.append((algorithm, digest.lower()))
	return checksums


def validate_checksums(content: str, checksums: list[tuple[str, str]]) -> None:
	"""Raise ``ChecksumError`` unless every checksum matches ``content``."""
	for algorithm, expected in checksums:
		actual = hashlib.new(algorithm, content.encode("utf-8")).hexdigest()
		if actual != expected:
			raise ChecksumError(
				f"Checksum validation failed for {algorithm}. Expected: {expected}, Got: {actual}"
			)


class PurlGitHubContentLoader:
	"""Load a file from a GitHub repository addressed by a package URL."""

	def __init__(self, token: str | None = None, api_url: str = GITHUB_API_URL, client: GitHubClient | None = None):
		self.token = token
		self.api_url = api_url
		self._client = client

	@property
	def client(self) -> GitHubClient:
		if self._client is None:
			self._client = GitHubClient(resolve_token(self.token), api_url=self.api_url)
		return self._client

	def load(self, source: str) -> str:
		try:
			purl = PackageURL.from_string(source)
		except ValueError as e:
			raise ContentLoadError(f"Invalid package URL {source}: {e}") from e

		if purl.type != "github":
			raise ContentLoadError(f"Unsupported purl type: {purl.type}. Only 'github' is supported")

		qualifiers = dict(purl.qualifiers or {})
		subpath = purl.subpath or ""
		# Also accept qualifiers written after the subpath
		if "?" in subpath:
			subpath, _, query = subpath.partition("?")
			qualifiers.update(parse_qsl(query))
		if not subpath:
			raise ContentLoadError("purl must include a subpath (e.g., #path/to/config.yaml)")
		if not purl.namespace:
			raise ContentLoadError(f"purl must name the repository owner: {source}")

		try:
			ref = purl.version or self.client.get_repository(purl.namespace, purl.name)["default_branch"]
			logger.debug("Fetching %s from %s/%s@%s", subpath, purl.namespace, purl.name, ref)
			content = self.client.get_file_contents(purl.namespace, purl.name, subpath, ref)
		except (GitHubAPIError, requests.RequestException) as e:
			raise ContentLoadError(f"Failed to load {source}: {e}") from e

		if qualifiers.get("checksum"):
			validate_checksums(content, parse_checksums(qualifiers["checksum"]))
		return content


class ContentLoaderFactory:
	"""Dispatch a locator to the matching loader."""

	def __init__(self, token: str | None = None, api_url: str = GITHUB_API_URL, client: GitHubClient | None = None):
		self.local = LocalContentLoader()
		self.https = HTTPSContentLoader()
		self.purl = PurlGitHubContentLoader(token, api_url=api_url, client=client)

	def get_loader(self, source: str) -> ContentLoader:
		# Plain http:// is rejected by the HTTPS loader
		if source.startswith(("https://", "http://")):
			return self.https
		if source.startswith("pkg:"):
			return self.purl
		return self.local

	def load(self, source: str) -> str:
		return self.get_loader(source).load(source)


def source_filename(source: str) -> str:
	"""Name used to pick a parser for ``source``.

	Examples:
	'pkg:github/acme/cfg@main#configs/release.yml' -> 'configs/release.yml'
	'https://example.com/release.json?raw=1' -> 'https://example.com/release.json'
	"""
	if source.startswith("pkg:") and "#" in source:
		return source.split("#", 1)[1].split("?", 1)[0]
	return source.split("?", 1)[0]
