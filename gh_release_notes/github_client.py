import logging
from collections.abc import Iterator
from typing import Any
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_random_exponential
from urllib3.util import Retry

from .constants import GITHUB_API_URL, REQUEST_TIMEOUT, USER_AGENT
from .exceptions import GitHubAPIError

logger = logging.getLogger(__name__)


class GitHubClient:
	"""Client to interact with the GitHub REST and GraphQL APIs."""

	def __init__(
		self,
		token: str,
		api_url: str = GITHUB_API_URL,
		timeout: float = REQUEST_TIMEOUT,
		user_agent: str = USER_AGENT,
	):
		self.token = token
		self.api_url = api_url.rstrip("/")
		self.timeout = timeout
		self.session = requests.Session()
		self.session.headers.update(
			{
				"Authorization": f"Bearer {token}",
				"User-Agent": user_agent,
				"Accept": "application/vnd.github+json",
			}
		)
		retries = Retry(
			total=3,
			backoff_factor=0.1,
			status_forcelist=[500, 502, 503, 504],
			allowed_methods=None,
		)
		self.session.mount("https://", HTTPAdapter(max_retries=retries))

	def rest(self, pathname: str, params: dict[str, Any] | None = None) -> Any:
		"""GET a REST endpoint and return the decoded JSON body.

		Raises:
			GitHubAPIError: On any non-2xx response.
		"""
		url = f"{self.api_url}{pathname}"
		r = self.session.get(url, params=params, timeout=self.timeout)
		if not r.ok:
			raise GitHubAPIError(f"GitHub REST GET {url} -> {r.status_code}: {r.text}", status_code=r.status_code)
		return r.json()

	@retry(
		retry=retry_if_exception_type(requests.ConnectionError),
		wait=wait_random_exponential(min=1, max=10),
		stop=stop_after_attempt(3),
		reraise=True,
	)
	def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
		"""Execute a GraphQL query and return its ``data`` object.

		Raises:
			GitHubAPIError: On a non-2xx response or an ``errors`` payload.
		"""
		r = self.session.post(
			f"{self.api_url}/graphql",
			json={"query": query, "variables": variables or {}},
			timeout=self.timeout,
		)
		if not r.ok:
			raise GitHubAPIError(f"GitHub GraphQL -> {r.status_code}: {r.text}", status_code=r.status_code)

		payload = r.json()
		if payload.get("errors"):
			raise GitHubAPIError(f"GitHub GraphQL errors: {payload['errors']}")
		return payload.get("data") or {}

	def get_repository(self, owner: str, name: str) -> dict:
		"""Return repository metadata (including ``default_branch``)."""
		return self.rest(f"/repos/{owner}/{name}")

	def get_release_by_tag(self, owner: str, name: str, tag: str) -> dict:
		return self.rest(f"/repos/{owner}/{name}/releases/tags/{quote(tag, safe='')}")

	def iter_releases(self, owner: str, name: str, per_page: int = 100) -> Iterator[dict]:
		"""Yield all releases, newest first as ordered by the API."""
		page = 1
		while True:
			releases = self.rest(
				f"/repos/{owner}/{name}/releases",
				params={"per_page": per_page, "page": page},
			)
			yield from releases
			if len(releases) < per_page:
				return
			page += 1

	def get_matching_tag_refs(self, owner: str, name: str, tag: str) -> list[dict]:
		return self.rest(f"/repos/{owner}/{name}/git/matching-refs/tags/{quote(tag, safe='')}")

	def get_tag_object(self, owner: str, name: str, sha: str) -> dict:
		"""Return an annotated tag object."""
		return self.rest(f"/repos/{owner}/{name}/git/tags/{sha}")

	def get_commit(self, owner: str, name: str, sha: str) -> dict:
		return self.rest(f"/repos/{owner}/{name}/commits/{sha}")

	def get_user(self, login: str) -> dict:
		return self.rest(f"/users/{quote(login, safe='')}")

	def get_file_contents(self, owner: str, name: str, path: str, ref: str | None = None) -> str:
		"""Return the raw contents of a file in a repository."""
		url = f"{self.api_url}/repos/{owner}/{name}/contents/{quote(path)}"
		r = self.session.get(
			url,
			params={"ref": ref} if ref else None,
			headers={"Accept": "application/vnd.github.raw+json"},
			timeout=self.timeout,
		)
		if not r.ok:
			raise GitHubAPIError(f"GitHub REST GET {url} -> {r.status_code}: {r.text}", status_code=r.status_code)
		return r.text
