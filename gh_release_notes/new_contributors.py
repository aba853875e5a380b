"""Detect first-time contributors of a release.

A login is new when it has no merged PR in the repository before the previous
release. Logins are checked in batches, each batch being a single GraphQL
request with one aliased ``search`` per login.
"""

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

from .constants import NEW_CONTRIBUTORS_BATCH_SIZE
from .models import Author, NewContributor, NewContributorsResult, PullRequest
from .queries import build_prior_prs_query, login_alias

logger = logging.getLogger(__name__)

# PRs per request attributed to the fetch that produced the batch
PR_FETCH_PAGE_SIZE = 50


def _chunk(items: list, size: int) -> list[list]:
	return [items[i : i + size] for i in range(0, len(items), size)]


def group_by_author(pull_requests: Iterable[PullRequest]) -> dict[str, tuple[Author, list[PullRequest]]]:
	"""Map each login to its first-seen author record and all of its PRs."""
	groups: dict[str, tuple[Author, list[PullRequest]]] = {}
	for pr in pull_requests:
		if not pr.author:
			continue
		if pr.author.login not in groups:
			groups[pr.author.login] = (pr.author, [])
		groups[pr.author.login][1].append(pr)
	return groups


def find_new_contributors(
	graphql: Callable[[str, dict[str, Any] | None], dict[str, Any]],
	owner: str,
	repo: str,
	pull_requests: list[PullRequest],
	prev_release_date: str,
	batch_size: int = NEW_CONTRIBUTORS_BATCH_SIZE,
) -> NewContributorsResult:
	"""Classify the authors of ``pull_requests`` as new or returning.

	``prev_release_date`` is required; without a previous release there is no
	cutoff and callers skip detection altogether.
	"""
	groups = group_by_author(pull_requests)
	logger.debug("Checking %d contributors for PRs merged before %s", len(groups), prev_release_date)

	new_contributors = []
	for batch in _chunk(list(groups.values()), batch_size):
		search_logins = [(login_alias(author.login), author.search_login) for author, _ in batch]
		logger.debug("Checking batch: %s", ", ".join(author.login for author, _ in batch))
		data = graphql(build_prior_prs_query(owner, repo, search_logins, prev_release_date), None)

		for author, prs in batch:
			result = data.get(login_alias(author.login))
			if not isinstance(result, dict):
				logger.debug("No search result for %s", author.login)
				continue

			prior_count = result.get("issueCount") or 0
			if prior_count:
				logger.debug("%s is not new (%d PRs before %s)", author.login, prior_count, prev_release_date)
				continue

			first_pr = min(prs, key=lambda pr: pr.merged_at_datetime)
			logger.debug("%s is a new contributor (first PR #%d)", author.login, first_pr.number)
			new_contributors.append(NewContributor(login=author.login, is_bot=author.is_bot, first_pull_request=first_pr))

	new_contributors.sort(key=lambda contributor: contributor.login)
	api_calls_used = math.ceil(len(pull_requests) / PR_FETCH_PAGE_SIZE) + math.ceil(len(groups) / batch_size)
	logger.debug("Found %d new contributors using %d API calls", len(new_contributors), api_calls_used)
	return NewContributorsResult(
		new_contributors=new_contributors,
		total_contributors=len(groups),
		api_calls_used=api_calls_used,
	)


def format_new_contributors_section(new_contributors: list[NewContributor], exclude_contributors: Iterable[str] = ()) -> str:
	"""Render the ``## New Contributors`` section, or an empty string if there is none."""
	exclude_contributors = set(exclude_contributors)
	lines = [
		f"* @{contributor.login} made their first contribution in {contributor.first_pull_request.url}"
		for contributor in new_contributors
		if contributor.login not in exclude_contributors
	]
	if not lines:
		return ""
	return "## New Contributors\n" + "\n".join(lines)
