import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor

import requests

from .assembler import assemble_release_info, changelog_ref, full_changelog_link
from .categorize import apply_label_filters, categorize_pull_requests, sort_pull_requests
from .constants import NEW_CONTRIBUTORS_PLACEHOLDER
from .content_loader import ContentLoader, ContentLoaderFactory
from .contributors import build_contributors, enrich_contributor_avatars
from .core.config import ReleaseNotesConfig
from .core.interfaces import (
	CollectingProgressReporter,
	CompositeProgressReporter,
	NullProgressReporter,
	ProgressReporter,
)
from .github_client import GitHubClient
from .models import NewContributorsResult, PullRequest, Release, ReleaseConfig, ReleaseResult
from .new_contributors import find_new_contributors, format_new_contributors_section
from .path_filter import filter_by_changed_files
from .release_config_loader import load_release_config
from .releases import ReleaseResolver
from .search import SearchFields, fetch_merged_prs
from .sponsors import SPONSOR_MODE_GRAPHQL, SPONSOR_MODE_HTML, enrich_with_html_sponsor_data, resolve_sponsor_fetch_mode
from .template import TemplateRenderer

logger = logging.getLogger(__name__)

COMMIT_SHA_PATTERN = re.compile(r"^[0-9a-f]{7,40}$")


class ReleaseNotesGenerator:
	"""Collect, filter and categorize the merged PRs of a release and render its notes."""

	def __init__(
		self,
		config: ReleaseNotesConfig,
		progress_reporter: ProgressReporter | None = None,
		client: GitHubClient | None = None,
		content_loader: ContentLoader | None = None,
		sponsor_session: requests.Session | None = None,
	):
		self.config = config
		# Events are also kept so that warnings end up in the result
		self.events = CollectingProgressReporter()
		self.progress = CompositeProgressReporter([progress_reporter or NullProgressReporter(), self.events])
		self.client = client or GitHubClient(
			config.github.token,
			api_url=config.github.api_url,
			timeout=config.github.timeout,
			user_agent=config.github.user_agent,
		)
		self.content_loader = content_loader or ContentLoaderFactory(
			config.github.token, api_url=config.github.api_url, client=self.client
		)
		self.sponsor_session = sponsor_session
		self.release_config: ReleaseConfig | None = None

	def load_release_config(self) -> ReleaseConfig:
		self.release_config, warnings = load_release_config(self.config.config_source, self.content_loader)
		for warning in warnings:
			self.progress.warning(warning)
		return self.release_config

	def _should_detect_new_contributors(self, release_config: ReleaseConfig) -> bool:
		options = self.config.options
		if options.include_new_contributors is not None:
			return options.include_new_contributors
		return NEW_CONTRIBUTORS_PLACEHOLDER in release_config.template or options.extended_output

	def _base_branch(self, target_commitish: str, until: str | None) -> str | None:
		# A resolved tag bounds the search by date; tags and SHAs are no valid base branches
		if until or COMMIT_SHA_PATTERN.match(target_commitish):
			return None
		return target_commitish

	def _sort_and_categorize(self, pull_requests: list[PullRequest], release_config: ReleaseConfig):
		sorted_prs = sort_pull_requests(pull_requests, release_config.sort_by, release_config.sort_direction)
		filtered = apply_label_filters(sorted_prs, release_config)
		categorized = categorize_pull_requests(sorted_prs, release_config)
		contributors = build_contributors(filtered, release_config.exclude_contributors)
		return filtered, categorized, contributors

	def generate(self, owner: str, repo: str) -> ReleaseResult:
		"""Generate the release notes of ``owner/repo``.

		Raises:
			ConfigurationError: If the release config is invalid.
			GitHubAPIError: If repository metadata or the PR search cannot be fetched.
			PaginationLimitError: If a pagination loop runs away.
		"""
		options = self.config.options
		release_config = self.release_config or self.load_release_config()

		self.progress.info(f"Fetching repository info for {owner}/{repo}")
		default_branch = self.client.get_repository(owner, repo)["default_branch"]
		target_commitish = options.target or default_branch

		resolver = ReleaseResolver(
			self.client,
			owner,
			repo,
			tag_prefix=release_config.tag_prefix,
			include_pre_releases=release_config.include_pre_releases,
			filter_by_commitish=release_config.filter_by_commitish,
		)
		last_release, until = resolver.resolve_range(options.prev_tag, options.target, options.tag, target_commitish)
		if last_release:
			self.progress.info(f"Previous release: {last_release.tag_name}")
		else:
			self.progress.info("No previous release found")

		sponsor_mode = resolve_sponsor_fetch_mode(
			options.sponsor_fetch_mode, self.config.github.token, options.extended_output
		)
		logger.debug("Sponsor fetch mode: %s", sponsor_mode)

		self.progress.info("Fetching merged pull requests")
		pull_requests = fetch_merged_prs(
			self.client.graphql,
			owner,
			repo,
			since=last_release.boundary_date if last_release else None,
			until=until,
			base_branch=self._base_branch(target_commitish, until),
			include_labels=release_config.include_labels,
			exclude_labels=release_config.exclude_labels,
			fields=SearchFields.for_change_template(
				release_config.change_template,
				extended=options.extended_output,
				sponsor=sponsor_mode == SPONSOR_MODE_GRAPHQL,
			),
		)
		self.progress.info(f"Found {len(pull_requests)} merged pull requests", count=len(pull_requests))

		if release_config.include_paths:
			pull_requests = filter_by_changed_files(
				pull_requests, release_config.include_paths, self.client.graphql, owner, repo
			)
			self.progress.info(f"{len(pull_requests)} pull requests touch the included paths", count=len(pull_requests))

		with ThreadPoolExecutor(max_workers=2) as executor:
			new_contributors, enriched = self._submit_background_tasks(
				executor, owner, repo, pull_requests, last_release, release_config, sponsor_mode
			)
			filtered, categorized, contributors = self._sort_and_categorize(pull_requests, release_config)
			enriched_prs = enriched.result() if enriched else pull_requests
			new_contributors_result = new_contributors.result() if new_contributors else None

		if enriched_prs != pull_requests:
			logger.debug("Sponsor data changed author records, categorizing again")
			filtered, categorized, contributors = self._sort_and_categorize(enriched_prs, release_config)

		if options.extended_output:
			contributors = enrich_contributor_avatars(contributors, self.client.get_user)

		previous_tag = options.prev_tag or (last_release.tag_name if last_release else None)
		changelog_link = full_changelog_link(
			owner, repo, previous_tag, changelog_ref(options.tag, options.target, default_branch, options.preview)
		)
		release = assemble_release_info(
			owner,
			repo,
			release_config,
			filtered,
			categorized,
			contributors,
			last_release,
			target_commitish,
			changelog_link,
			new_contributors_section=format_new_contributors_section(
				new_contributors_result.new_contributors, release_config.exclude_contributors
			)
			if new_contributors_result
			else "",
			tag=options.tag,
		)

		self.progress.success(f"Generated release notes for {owner}/{repo}")
		return ReleaseResult(
			owner=owner,
			repo=repo,
			default_branch=default_branch,
			target_commitish=target_commitish,
			release=release,
			pull_requests=filtered,
			categorized=categorized,
			contributors=contributors,
			new_contributors=new_contributors_result,
			last_release=last_release,
			full_changelog_link=changelog_link,
			warnings=self.events.messages("warning"),
		)

	def _submit_background_tasks(
		self,
		executor: ThreadPoolExecutor,
		owner: str,
		repo: str,
		pull_requests: list[PullRequest],
		last_release: Release | None,
		release_config: ReleaseConfig,
		sponsor_mode: str,
	) -> tuple["Future[NewContributorsResult] | None", "Future[list[PullRequest]] | None"]:
		"""Start new-contributor detection and HTML sponsor probing without waiting for them."""
		new_contributors = None
		enriched = None
		boundary_date = last_release.boundary_date if last_release else None

		if self._should_detect_new_contributors(release_config):
			if boundary_date:
				self.progress.info("Detecting new contributors")
				new_contributors = executor.submit(
					find_new_contributors, self.client.graphql, owner, repo, pull_requests, boundary_date
				)
			else:
				logger.debug("Skipping new contributor detection, no previous release")

		if sponsor_mode == SPONSOR_MODE_HTML and pull_requests:
			self.progress.info("Checking sponsor pages")
			enriched = executor.submit(enrich_with_html_sponsor_data, pull_requests, self.sponsor_session)
		return new_contributors, enriched

	def render_template(self, result: ReleaseResult, source: str) -> str:
		"""Render a user template (path, URL or purl) with the structured result."""
		return TemplateRenderer(self.content_loader).load_and_render(source, result.to_dict())
