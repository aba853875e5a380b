import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from urllib.parse import quote

import requests

from .constants import GITHUB_URL
from .exceptions import GitHubAPIError
from .models import Contributor, PullRequest

logger = logging.getLogger(__name__)


def build_contributors(pull_requests: Iterable[PullRequest], exclude_contributors: Iterable[str] = ()) -> list[Contributor]:
	"""Return the first-seen author of each login, in PR order, minus excluded logins."""
	exclude_contributors = set(exclude_contributors)
	seen: dict[str, Contributor] = {}
	for pr in pull_requests:
		if pr.author and pr.author.login not in seen:
			seen[pr.author.login] = Contributor(pr.author)

	contributors = [contributor for login, contributor in seen.items() if login not in exclude_contributors]
	logger.debug("Collected %d unique contributors", len(contributors))
	return contributors


def enrich_contributor_avatars(
	contributors: list[Contributor],
	get_user: Callable[[str], dict],
) -> list[Contributor]:
	"""Fill in missing avatar URLs.

	Users get the deterministic ``github.com/<login>.png`` URL. Bots are looked
	up via REST as ``<login>[bot]``; lookups that fail leave the avatar empty.
	"""
	enriched = []
	for contributor in contributors:
		author = contributor.author
		if author.avatar_url:
			enriched.append(contributor)
			continue

		if not author.is_bot:
			avatar_url = f"{GITHUB_URL}/{quote(author.login)}.png?size=64"
		else:
			try:
				avatar_url = get_user(author.search_login).get("avatar_url") or ""
			except (GitHubAPIError, requests.RequestException) as e:
				logger.debug("Could not resolve avatar for %s: %s", author.login, e)
				avatar_url = ""
			if avatar_url:
				avatar_url += "&s=64" if "?" in avatar_url else "?s=64"

		enriched.append(Contributor(replace(author, avatar_url=avatar_url)))
	return enriched
