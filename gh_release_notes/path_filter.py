"""Keep only pull requests that touch configured path prefixes."""

import logging
from collections.abc import Callable
from typing import Any

from .constants import PATH_FILTER_CHUNK_SIZE, PATH_FILTER_MAX_ROUNDS
from .exceptions import PaginationLimitError
from .models import PullRequest
from .queries import build_pr_files_query

logger = logging.getLogger(__name__)


def matches_include_paths(path: str, include_paths: list[str]) -> bool:
	return any(path.startswith(prefix) for prefix in include_paths)


def _file_matches(node: dict, include_paths: list[str]) -> bool:
	for key in ("path", "previousFilePath"):
		value = node.get(key)
		if value and matches_include_paths(value, include_paths):
			return True
	return False


def filter_by_changed_files(
	pull_requests: list[PullRequest],
	include_paths: list[str],
	graphql: Callable[[str, dict[str, Any] | None], dict[str, Any]],
	owner: str,
	repo: str,
	chunk_size: int = PATH_FILTER_CHUNK_SIZE,
	max_rounds: int = PATH_FILTER_MAX_ROUNDS,
) -> list[PullRequest]:
	"""Return the PRs with at least one changed file under ``include_paths``.

	Files are fetched in rounds of up to ``chunk_size`` PRs per query, each PR
	paging with its own cursor. A PR leaves the pending set as soon as a file
	matches, or once its file list is exhausted. Output keeps the input order.

	Raises:
		PaginationLimitError: If PRs are still pending after ``max_rounds`` queries.
	"""
	if not include_paths or not pull_requests:
		return pull_requests

	cursors: dict[int, str | None] = {pr.number: None for pr in pull_requests}
	pending = list(cursors)
	kept: set[int] = set()

	rounds = 0
	while pending:
		if rounds >= max_rounds:
			raise PaginationLimitError(
				f"Changed-file lookup still pending for {len(pending)} PRs after {max_rounds} rounds"
			)
		rounds += 1

		batch = pending[:chunk_size]
		variables: dict[str, Any] = {"owner": owner, "name": repo}
		variables.update({f"after_pr_{number}": cursors[number] for number in batch})
		data = graphql(build_pr_files_query(batch), variables)
		repo_node = data.get("repo") or {}

		done: set[int] = set()
		for number in batch:
			files = (repo_node.get(f"pr_{number}") or {}).get("files") or {}
			if any(_file_matches(node or {}, include_paths) for node in files.get("nodes") or []):
				kept.add(number)
				done.add(number)
				continue

			page_info = files.get("pageInfo") or {}
			if page_info.get("hasNextPage"):
				cursors[number] = page_info.get("endCursor")
			else:
				done.add(number)

		pending = [number for number in pending if number not in done]

	logger.debug("include-paths kept %d of %d PRs in %d rounds", len(kept), len(pull_requests), rounds)
	return [pr for pr in pull_requests if pr.number in kept]
