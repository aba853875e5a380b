"""Sorting, label filtering and categorization of pull requests."""

import logging
from collections.abc import Iterable

from .models import PullRequest, ReleaseConfig
from .models.release_info import CategorizedPullRequests, CategoryGroup

logger = logging.getLogger(__name__)

SORT_BY_MERGED_AT = "merged_at"
SORT_BY_TITLE = "title"


def sort_pull_requests(
	pull_requests: Iterable[PullRequest],
	sort_by: str = SORT_BY_MERGED_AT,
	sort_direction: str = "descending",
) -> list[PullRequest]:
	"""Sort by merge time or title. Ties keep their input order."""
	def key(pr: PullRequest):
		return pr.title if sort_by == SORT_BY_TITLE else pr.merged_at_datetime

	# reverse=True keeps ties in input order
	return sorted(pull_requests, key=key, reverse=sort_direction == "descending")


def filter_by_exclude_labels(pull_requests: Iterable[PullRequest], exclude_labels: Iterable[str]) -> list[PullRequest]:
	exclude_labels = set(exclude_labels)
	if not exclude_labels:
		return list(pull_requests)
	return [pr for pr in pull_requests if not pr.has_any_label(exclude_labels)]


def filter_by_include_labels(pull_requests: Iterable[PullRequest], include_labels: Iterable[str]) -> list[PullRequest]:
	include_labels = set(include_labels)
	if not include_labels:
		return list(pull_requests)
	return [pr for pr in pull_requests if pr.has_any_label(include_labels)]


def apply_label_filters(pull_requests: Iterable[PullRequest], config: ReleaseConfig) -> list[PullRequest]:
	"""Drop PRs with an excluded label, then keep only PRs with an included label (if any are configured)."""
	filtered = filter_by_exclude_labels(pull_requests, config.exclude_labels)
	filtered = filter_by_include_labels(filtered, config.include_labels)
	logger.debug("Label filters left %d PRs", len(filtered))
	return filtered


def categorize_pull_requests(pull_requests: Iterable[PullRequest], config: ReleaseConfig) -> CategorizedPullRequests:
	"""Partition PRs into the configured categories.

	A PR without any label known to a category goes to the category without
	labels, or to ``uncategorized`` if there is none. Every other PR is added
	to each category sharing one of its labels, so it can appear more than
	once. Category order follows the config; PR order follows the input.
	"""
	all_category_labels = config.category_labels
	result = CategorizedPullRequests(categories=[CategoryGroup(category) for category in config.categories])
	wildcard = next((group for group in result.categories if group.category.is_wildcard), None)

	labelled = []
	for pr in apply_label_filters(pull_requests, config):
		if pr.has_any_label(all_category_labels):
			labelled.append(pr)
		elif wildcard:
			wildcard.pull_requests.append(pr)
		else:
			result.uncategorized.append(pr)

	for group in result.categories:
		if group.category.is_wildcard:
			continue
		labels = set(group.category.labels)
		group.pull_requests.extend(pr for pr in labelled if pr.has_any_label(labels))

	return result
