"""Find the previous release that bounds a release-notes run."""

import logging

import requests

from .constants import TAG_DEREFERENCE_MAX_HOPS
from .exceptions import GitHubAPIError
from .github_client import GitHubClient
from .models import Release
from .models._utils import parse_timestamp

logger = logging.getLogger(__name__)


class ReleaseResolver:
	"""Resolve the previous release (and optionally an upper date bound) of a repository.

	Precedence, highest first: an explicit previous tag, an existing tag named
	by the ``tag``/``target`` hints, and finally the most recent qualifying
	release.
	"""

	def __init__(
		self,
		client: GitHubClient,
		owner: str,
		repo: str,
		tag_prefix: str = "",
		include_pre_releases: bool = False,
		filter_by_commitish: bool = False,
	):
		self.client = client
		self.owner = owner
		self.repo = repo
		self.tag_prefix = tag_prefix
		self.include_pre_releases = include_pre_releases
		self.filter_by_commitish = filter_by_commitish

	def resolve(
		self,
		prev_tag: str | None = None,
		target: str | None = None,
		tag: str | None = None,
		target_commitish: str | None = None,
	) -> Release | None:
		return self.resolve_range(prev_tag, target, tag, target_commitish)[0]

	def resolve_range(
		self,
		prev_tag: str | None = None,
		target: str | None = None,
		tag: str | None = None,
		target_commitish: str | None = None,
	) -> tuple[Release | None, str | None]:
		"""Return ``(previous_release, until)``.

		``until`` is the commit date of an existing tag matching the hints, used
		as the upper bound of the PR search; ``None`` means "up to now".

		Raises:
			GitHubAPIError: If an explicit ``prev_tag`` has no release or the
				releases cannot be listed.
		"""
		found_tag, until = self._find_existing_tag(target, tag)

		if prev_tag:
			logger.debug("Using explicit previous tag %s", prev_tag)
			return Release.from_dict(self.client.get_release_by_tag(self.owner, self.repo, prev_tag)), until

		releases = self._qualifying_releases(target_commitish)
		if found_tag:
			return self._release_before_tag(releases, found_tag, until), until

		if not releases:
			logger.debug("No previous release found")
			return None, None

		logger.debug("Detected last release %s", releases[0].tag_name)
		return releases[0], None

	def _find_existing_tag(self, target: str | None, tag: str | None) -> tuple[str | None, str | None]:
		for hint in dict.fromkeys(h for h in (tag, target) if h):
			date = self._tag_commit_date(hint)
			if date:
				logger.debug("Found existing tag %s committed at %s", hint, date)
				return hint, date
		return None, None

	def _tag_commit_date(self, tag: str) -> str | None:
		"""Return the committer date of the commit ``tag`` points to, if any.

		Annotated tags are followed for a few hops. Any failure means "not found".
		"""
		try:
			refs = self.client.get_matching_tag_refs(self.owner, self.repo, tag)
			ref = next((r for r in refs if r.get("ref") == f"refs/tags/{tag}"), None)
			if not ref:
				return None

			obj = ref.get("object") or {}
			hops = 0
			while obj.get("type") == "tag":
				if hops >= TAG_DEREFERENCE_MAX_HOPS:
					logger.debug("Gave up dereferencing tag %s after %d hops", tag, hops)
					return None
				obj = self.client.get_tag_object(self.owner, self.repo, obj["sha"]).get("object") or {}
				hops += 1

			if obj.get("type") != "commit":
				return None
			commit = self.client.get_commit(self.owner, self.repo, obj["sha"])
			return commit["commit"]["committer"]["date"]
		except (GitHubAPIError, requests.RequestException, KeyError) as e:
			logger.debug("Could not resolve tag %s: %s", tag, e)
			return None

	def _qualifies(self, release: Release, target_commitish: str | None) -> bool:
		if release.draft or not release.tag_name.startswith(self.tag_prefix):
			return False
		if release.prerelease and not self.include_pre_releases:
			return False
		if self.filter_by_commitish and target_commitish:
			return release.target_commitish in (target_commitish, f"refs/heads/{target_commitish}")
		return True

	def _qualifying_releases(self, target_commitish: str | None) -> list[Release]:
		"""Return qualifying releases, newest first."""
		releases = [Release.from_dict(data) for data in self.client.iter_releases(self.owner, self.repo)]
		releases = [r for r in releases if r.boundary_date and self._qualifies(r, target_commitish)]
		releases.sort(key=lambda r: r.boundary_datetime, reverse=True)
		return releases

	def _release_before_tag(self, releases: list[Release], tag: str, tag_date: str | None) -> Release | None:
		seen_tag = False
		for release in releases:
			if seen_tag:
				logger.debug("Previous release of %s is %s", tag, release.tag_name)
				return release
			seen_tag = release.tag_name == tag
		if seen_tag:
			return None

		# The tag has no release of its own; fall back to its date
		if tag_date:
			cutoff = parse_timestamp(tag_date)
			for release in releases:
				if release.tag_name != tag and release.boundary_datetime <= cutoff:
					logger.debug("Newest release before %s is %s", tag, release.tag_name)
					return release
		return None
