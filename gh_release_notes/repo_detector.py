"""Work out which repository to generate release notes for."""

import logging
import os
import re
import subprocess
from dataclasses import dataclass

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "github.com"

HTTPS_URL_PATTERN = re.compile(r"^https?://([^/]+)/([^/]+)/([^/]+?)(?:\.git)?/?$")
SCP_URL_PATTERN = re.compile(r"^(?:[^@/]+@)?([^:/]+):([^/]+)/([^/]+?)(?:\.git)?$")
SSH_URL_PATTERN = re.compile(r"^ssh://(?:[^@/]+@)?([^/]+)/([^/]+)/([^/]+?)(?:\.git)?$")
REMOTE_LINE_PATTERN = re.compile(r"^(\S+)\s+(\S+)\s+\((fetch|push)\)$")

# Preferred remotes, highest first
REMOTE_SCORES = {"upstream": 3, "github": 2, "origin": 1}


@dataclass(frozen=True)
class Repo:
	owner: str
	name: str
	host: str = DEFAULT_HOST

	@property
	def full_name(self) -> str:
		return f"{self.owner}/{self.name}"


def normalize_host(host: str) -> str:
	host = host.lower()
	host = host.removeprefix("www.")
	return re.sub(r":\d+$", "", host)


def parse_git_url(url: str) -> Repo | None:
	"""Parse an HTTPS, scp-style or ssh:// git remote URL.

	Examples:
	'git@github.com:acme/demo.git' -> Repo('acme', 'demo', 'github.com')
	'https://www.GitHub.com/acme/demo' -> Repo('acme', 'demo', 'github.com')
	"""
	for pattern in (HTTPS_URL_PATTERN, SSH_URL_PATTERN, SCP_URL_PATTERN):
		match = pattern.match(url)
		if match:
			host, owner, name = match.groups()
			return Repo(owner=owner, name=name, host=normalize_host(host))
	return None


def parse_repo_ref(value: str, default_host: str = DEFAULT_HOST) -> Repo | None:
	"""Parse ``OWNER/REPO``, ``HOST/OWNER/REPO`` or a git URL."""
	if not value:
		return None
	if "://" in value or "@" in value:
		return parse_git_url(value)

	parts = value.split("/")
	if len(parts) == 2 and all(parts):
		return Repo(owner=parts[0], name=parts[1].removesuffix(".git"), host=default_host)
	if len(parts) == 3 and all(parts):
		return Repo(owner=parts[1], name=parts[2].removesuffix(".git"), host=normalize_host(parts[0]))
	return None


def read_git_remotes() -> list[tuple[str, str]]:
	"""Return ``(remote name, url)`` pairs from ``git remote -v``."""
	try:
		result = subprocess.run(["git", "remote", "-v"], capture_output=True, text=True, check=True, timeout=10)
	except (OSError, subprocess.SubprocessError) as e:
		logger.debug("git remote -v failed: %s", e)
		return []

	remotes = []
	for line in result.stdout.splitlines():
		match = REMOTE_LINE_PATTERN.match(line.strip())
		if match:
			remotes.append((match.group(1), match.group(2)))
	return remotes


def resolve_repo(flag_repo: str | None = None) -> Repo:
	"""Resolve the repository from, in order: the flag, ``GITHUB_REPOSITORY``,
	``GH_REPO``, then the git remotes of the working directory (``GH_HOST``
	filters remotes by host).

	Raises:
		ConfigurationError: If no repository can be determined.
	"""
	for source, value in (
		("--repo", flag_repo),
		("GITHUB_REPOSITORY", os.environ.get("GITHUB_REPOSITORY")),
		("GH_REPO", os.environ.get("GH_REPO")),
	):
		if value:
			repo = parse_repo_ref(value)
			if not repo:
				raise ConfigurationError(f"Invalid {source} value: {value}")
			return repo

	candidates = []
	for remote_name, url in read_git_remotes():
		repo = parse_git_url(url)
		if repo:
			candidates.append((REMOTE_SCORES.get(remote_name.lower(), 0), repo))
	if not candidates:
		raise ConfigurationError("No repository given and no usable git remote found. Use --repo owner/repo.")

	gh_host = os.environ.get("GH_HOST")
	if gh_host:
		candidates = [c for c in candidates if c[1].host == normalize_host(gh_host)]
		if not candidates:
			raise ConfigurationError(f"No remotes match GH_HOST={gh_host}. Add a matching remote or unset GH_HOST.")

	# max() keeps the first remote among equal scores
	score, repo = max(candidates, key=lambda c: c[0])
	logger.debug("Detected repository %s from git remotes", repo.full_name)
	return repo
