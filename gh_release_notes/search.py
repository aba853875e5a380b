"""Fetch merged pull requests through the GitHub search API."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .exceptions import PaginationLimitError
from .models import PullRequest
from .models._utils import parse_timestamp
from .queries import SEARCH_MERGED_PRS

logger = logging.getLogger(__name__)

GraphQLFn = Callable[[str, dict[str, Any] | None], dict[str, Any]]

MAX_SEARCH_PAGES = 1000


@dataclass(frozen=True)
class SearchFields:
	"""Optional PR fields requested from the search query."""

	body: bool = False
	url: bool = True
	base_ref_name: bool = False
	head_ref_name: bool = False
	sponsor: bool = False

	@classmethod
	def for_change_template(cls, change_template: str, extended: bool = False, sponsor: bool = False) -> "SearchFields":
		"""Request only what the change template renders, or everything for extended output."""
		if extended:
			return cls(body=True, url=True, base_ref_name=True, head_ref_name=True, sponsor=sponsor)
		return cls(
			body="$BODY" in change_template,
			url=True,
			base_ref_name="$BASE_REF_NAME" in change_template,
			head_ref_name="$HEAD_REF_NAME" in change_template,
			sponsor=sponsor,
		)

	def as_variables(self) -> dict[str, bool]:
		return {
			"withBody": self.body,
			"withURL": self.url,
			"withBase": self.base_ref_name,
			"withHead": self.head_ref_name,
			"withSponsor": self.sponsor,
		}


def _quote_label(label: str) -> str:
	return '"' + label.replace('"', '\\"') + '"'


def build_search_query(
	owner: str,
	repo: str,
	since: str | None = None,
	until: str | None = None,
	base_branch: str | None = None,
	include_labels: Iterable[str] = (),
	exclude_labels: Iterable[str] = (),
) -> str:
	"""Build the search string for merged PRs of a repository.

	The merge date is always expressed as a single range term, because
	separate ``merged:>`` and ``merged:<`` terms are not reliably ANDed.

	Examples:
	('acme', 'demo', since='2024-01-01T00:00:00Z')
		-> 'repo:acme/demo is:pr is:merged merged:2024-01-01T00:00:00Z..*'
	"""
	parts = [f"repo:{owner}/{repo}", "is:pr", "is:merged"]
	if base_branch:
		parts.append(f"base:{base_branch}")
	if since or until:
		parts.append(f"merged:{since or '*'}..{until or '*'}")
	parts.extend(f"-label:{_quote_label(label)}" for label in exclude_labels)
	include_labels = list(include_labels)
	if include_labels:
		parts.append("label:" + ",".join(_quote_label(label) for label in include_labels))
	return " ".join(parts)


def _in_window(pull_request: PullRequest, since: datetime | None, until: datetime | None) -> bool:
	# the range term is inclusive; merges at the boundary instant belong to the previous release
	merged_at = pull_request.merged_at_datetime
	if since and merged_at <= since:
		return False
	if until and merged_at > until:
		return False
	return True


def fetch_merged_prs(
	graphql: GraphQLFn,
	owner: str,
	repo: str,
	since: str | None = None,
	until: str | None = None,
	base_branch: str | None = None,
	include_labels: Iterable[str] = (),
	exclude_labels: Iterable[str] = (),
	fields: SearchFields | None = None,
	max_pages: int = MAX_SEARCH_PAGES,
) -> list[PullRequest]:
	"""Return all merged PRs matching the query, in search result order.

	Raises:
		GitHubAPIError: If a search page cannot be fetched.
		PaginationLimitError: If more than ``max_pages`` pages are returned.
	"""
	q = build_search_query(owner, repo, since, until, base_branch, include_labels, exclude_labels)
	fields = fields or SearchFields()
	logger.debug("Searching merged PRs: %s", q)

	pull_requests: list[PullRequest] = []
	seen: set[int] = set()
	after = None
	for page in range(1, max_pages + 1):
		data = graphql(SEARCH_MERGED_PRS, {"q": q, "after": after, **fields.as_variables()})
		search = data.get("search") or {}
		for node in search.get("nodes") or []:
			# non-PR nodes come back as empty objects
			if not node or "number" not in node or node["number"] in seen:
				continue
			seen.add(node["number"])
			pull_requests.append(PullRequest.from_dict(node))

		page_info = search.get("pageInfo") or {}
		logger.debug("Fetched search page %d (%d PRs so far)", page, len(pull_requests))
		if not page_info.get("hasNextPage"):
			break
		after = page_info.get("endCursor")
	else:
		raise PaginationLimitError(f"PR search exceeded {max_pages} pages")

	since_dt = parse_timestamp(since) if since else None
	until_dt = parse_timestamp(until) if until else None
	result = [pr for pr in pull_requests if _in_window(pr, since_dt, until_dt)]
	logger.debug("Found %d merged PRs in range", len(result))
	return result
