"""Annotate pull request authors with their GitHub Sponsors page.

Two strategies exist. ``graphql`` asks the search query for the
``sponsorsListing`` field, which GitHub refuses for app installation tokens.
``html`` probes ``https://github.com/sponsors/<login>`` without credentials
after the PRs have been fetched.
"""

import logging
from dataclasses import dataclass

import requests

from .constants import (
	GITHUB_URL,
	REQUEST_TIMEOUT,
	SERVICE_TOKEN_PREFIXES,
	SPONSOR_MAX_CONCURRENCY,
	SPONSOR_MAX_ERRORS,
	USER_AGENT,
)
from .core.config import SPONSOR_FETCH_MODES
from .core.execution import ExecutionStrategy, ThreadPoolStrategy
from .models import PullRequest

logger = logging.getLogger(__name__)

SPONSOR_MODE_NONE = "none"
SPONSOR_MODE_GRAPHQL = "graphql"
SPONSOR_MODE_HTML = "html"
SPONSOR_MODE_AUTO = "auto"


def is_service_token(token: str) -> bool:
	return token.startswith(SERVICE_TOKEN_PREFIXES)


def resolve_sponsor_fetch_mode(mode: str, token: str, extended_output: bool) -> str:
	"""Turn ``auto`` into a concrete strategy.

	Without extended output nothing renders sponsor data, so ``auto`` means
	``none``. App installation tokens cannot read ``sponsorsListing`` and fall
	back to ``html``.
	"""
	if mode not in SPONSOR_FETCH_MODES:
		raise ValueError(f"Invalid sponsor fetch mode: {mode}")
	if mode != SPONSOR_MODE_AUTO:
		return mode
	if not extended_output:
		return SPONSOR_MODE_NONE
	if is_service_token(token):
		return SPONSOR_MODE_HTML
	return SPONSOR_MODE_GRAPHQL


@dataclass(frozen=True)
class SponsorCheckResult:
	login: str
	sponsor_url: str | None = None
	has_error: bool = False


def create_probe_session() -> requests.Session:
	"""Return an unauthenticated session for sponsor page probes."""
	session = requests.Session()
	session.headers.update({"User-Agent": USER_AGENT})
	return session


def check_sponsor_page(session: requests.Session, login: str, timeout: float = REQUEST_TIMEOUT) -> SponsorCheckResult:
	"""Probe the sponsors page of ``login`` with a HEAD request.

	GitHub answers 200 for an existing page and redirects to the profile
	otherwise, so redirects are not followed.
	"""
	sponsor_url = f"{GITHUB_URL}/sponsors/{login}"
	try:
		response = session.head(sponsor_url, allow_redirects=False, timeout=timeout)
	except requests.RequestException as e:
		logger.warning("Failed to check sponsor page for %s: %s", login, e)
		return SponsorCheckResult(login, has_error=True)

	if response.status_code == 200:
		logger.debug("Found sponsor page for %s", login)
		return SponsorCheckResult(login, sponsor_url=sponsor_url)
	if 300 <= response.status_code < 400 or response.status_code == 404:
		logger.debug("No sponsor page for %s (%d)", login, response.status_code)
		return SponsorCheckResult(login)
	if 400 <= response.status_code < 500:
		logger.warning("Got %d checking sponsor page for %s, skipping", response.status_code, login)
		return SponsorCheckResult(login, has_error=True)

	logger.debug("Unexpected status %d for %s, assuming no sponsor page", response.status_code, login)
	return SponsorCheckResult(login)


def enrich_with_html_sponsor_data(
	pull_requests: list[PullRequest],
	session: requests.Session | None = None,
	strategy: ExecutionStrategy | None = None,
	max_concurrency: int = SPONSOR_MAX_CONCURRENCY,
	max_errors: int = SPONSOR_MAX_ERRORS,
) -> list[PullRequest]:
	"""Return the PRs with sponsor URLs set on their (non-bot) authors.

	Once more than ``max_errors`` probes have failed, remaining checks are
	skipped and the original, unenriched list is returned.
	"""
	session = session or create_probe_session()
	strategy = strategy or ThreadPoolStrategy(max_workers=max_concurrency)

	logins = list(
		dict.fromkeys(pr.author.login for pr in pull_requests if pr.author and pr.author.type == "User")
	)
	logger.debug("Checking sponsor pages of %d authors", len(logins))

	sponsor_urls: dict[str, str] = {}
	errors = 0
	for start in range(0, len(logins), max_concurrency):
		batch = logins[start : start + max_concurrency]
		results = strategy.execute_parallel(
			[lambda login=login: check_sponsor_page(session, login) for login in batch]
		)
		for result in results:
			if result.has_error:
				errors += 1
			elif result.sponsor_url:
				sponsor_urls[result.login] = result.sponsor_url

		if errors > max_errors:
			logger.warning("Too many errors checking sponsor pages, discarding sponsor data")
			return pull_requests

	logger.debug("Found %d sponsor pages out of %d authors", len(sponsor_urls), len(logins))
	return [
		pr.with_author(pr.author.with_sponsor(sponsor_urls[pr.author.login]))
		if pr.author and pr.author.login in sponsor_urls
		else pr
		for pr in pull_requests
	]
