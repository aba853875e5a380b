"""Render the release body and version information from categorized PRs.

Placeholders follow release-drafter: ``$CHANGES``, ``$CONTRIBUTORS``,
``$PREVIOUS_TAG``, ``$RESOLVED_VERSION`` and friends in the release template,
``$TITLE``, ``$NUMBER``, ``$AUTHOR`` etc. in the change template.
"""

import logging
import re
from collections.abc import Iterable

from packaging.version import InvalidVersion, Version

from .constants import FULL_CHANGELOG_PLACEHOLDERS, GITHUB_URL, NEW_CONTRIBUTORS_PLACEHOLDER
from .models import Contributor, PullRequest, Release, ReleaseConfig, ReleaseInfo
from .models.release_info import CategorizedPullRequests

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\$[A-Z_]+")
EMPTY_NEW_CONTRIBUTORS_PATTERN = re.compile(r"\n?\s*\$NEW_CONTRIBUTORS")
CODE_SPAN_PATTERN = r"`.*?`"


def render_placeholders(template: str, values: dict[str, str]) -> str:
	"""Replace ``$NAME`` tokens in a single pass. Unknown tokens are kept as-is."""
	return PLACEHOLDER_PATTERN.sub(lambda m: values.get(m.group(0)[1:], m.group(0)), template)


def escape_title(title: str, escapes: str) -> str:
	"""Escape the characters listed in ``change-title-escapes``.

	``@`` and ``#`` get an empty HTML comment appended so they do not create
	mentions or links; other characters are backslash-escaped. Code spans are
	left untouched.

	Examples:
	('Fix `a_b` for @me', '_@') -> 'Fix `a_b` for @<!---->me'
	"""
	if not escapes:
		return title
	pattern = re.compile(f"[{re.escape(escapes)}]|{CODE_SPAN_PATTERN}")

	def replace(match: re.Match) -> str:
		text = match.group(0)
		if len(text) > 1:
			return text
		if text in ("@", "#"):
			return f"{text}<!---->"
		return f"\\{text}"

	return pattern.sub(replace, title)


def render_change(pr: PullRequest, config: ReleaseConfig) -> str:
	return render_placeholders(
		config.change_template,
		{
			"NUMBER": str(pr.number),
			"TITLE": escape_title(pr.title, config.change_title_escapes),
			"AUTHOR": pr.author_login or "ghost",
			"BODY": pr.body or "",
			"URL": pr.url,
			"BASE_REF_NAME": pr.base_ref_name or "",
			"HEAD_REF_NAME": pr.head_ref_name or "",
		},
	)


def _render_change_list(pull_requests: list[PullRequest], config: ReleaseConfig, collapse_after: int | None = None) -> str:
	changes = "\n".join(render_change(pr, config) for pr in pull_requests)
	if collapse_after and len(pull_requests) > collapse_after:
		return f"<details>\n<summary>{len(pull_requests)} changes</summary>\n\n{changes}\n</details>"
	return changes


def render_changes(categorized: CategorizedPullRequests, config: ReleaseConfig) -> str:
	"""Render ``$CHANGES``: uncategorized PRs first, then each non-empty category."""
	sections = []
	if categorized.uncategorized:
		sections.append(_render_change_list(categorized.uncategorized, config))

	for group in categorized.categories:
		if not group.pull_requests:
			continue
		heading = render_placeholders(config.category_template, {"TITLE": group.category.title})
		changes = _render_change_list(group.pull_requests, config, group.category.collapse_after)
		sections.append(f"{heading}\n\n{changes}")

	if not sections:
		return config.no_changes_template
	return "\n\n".join(sections).strip()


def render_contributors(contributors: Iterable[Contributor], config: ReleaseConfig) -> str:
	"""Render ``$CONTRIBUTORS`` as ``@a, @b and @c``."""
	names = [
		f"[{contributor.author.search_login}]({contributor.author.url})" if contributor.is_bot else f"@{contributor.login}"
		for contributor in contributors
		if contributor.login not in config.exclude_contributors
	]
	if not names:
		return config.no_contributors_template
	if len(names) == 1:
		return names[0]
	return f"{', '.join(names[:-1])} and {names[-1]}"


def _base_version(last_release: Release | None, tag_prefix: str) -> Version:
	if not last_release:
		return Version("0.0.0")

	tag = last_release.tag_name
	if tag_prefix and tag.startswith(tag_prefix):
		tag = tag[len(tag_prefix) :]
	try:
		return Version(tag.lstrip("vV"))
	except InvalidVersion:
		logger.debug("Could not parse version from tag %s, starting at 0.0.0", last_release.tag_name)
		return Version("0.0.0")


def resolve_version_increment(pull_requests: Iterable[PullRequest], config: ReleaseConfig) -> str:
	"""Return ``major``, ``minor`` or ``patch`` from the version-resolver labels."""
	resolver = config.version_resolver
	labels = {label for pr in pull_requests for label in pr.labels}
	for increment, increment_labels in (
		("major", resolver.major),
		("minor", resolver.minor),
		("patch", resolver.patch),
	):
		if labels.intersection(increment_labels):
			return increment
	return resolver.default


def resolve_versions(
	last_release: Release | None,
	pull_requests: Iterable[PullRequest],
	config: ReleaseConfig,
) -> dict[str, str]:
	"""Return the version placeholders plus the parts of the resolved version."""
	base = _base_version(last_release, config.tag_prefix)
	candidates = {
		"major": (base.major + 1, 0, 0),
		"minor": (base.major, base.minor + 1, 0),
		"patch": (base.major, base.minor, base.micro + 1),
	}

	def render(parts: tuple[int, int, int]) -> str:
		return render_placeholders(
			config.version_template,
			{"MAJOR": str(parts[0]), "MINOR": str(parts[1]), "PATCH": str(parts[2])},
		)

	increment = resolve_version_increment(pull_requests, config)
	resolved = candidates[increment]
	logger.debug("Resolved %s version bump from %s", increment, base)
	return {
		"NEXT_MAJOR_VERSION": render(candidates["major"]),
		"NEXT_MINOR_VERSION": render(candidates["minor"]),
		"NEXT_PATCH_VERSION": render(candidates["patch"]),
		"RESOLVED_VERSION": render(resolved),
		"MAJOR": str(resolved[0]),
		"MINOR": str(resolved[1]),
		"PATCH": str(resolved[2]),
	}


def changelog_ref(tag: str | None, target: str | None, default_branch: str, preview: bool = False) -> str:
	"""Ref the full changelog points to. Previews prefer the target branch."""
	if preview:
		return target or tag or default_branch
	return tag or target or default_branch


def full_changelog_link(owner: str, repo: str, previous_tag: str | None, next_ref: str) -> str:
	"""
	Examples:
	('acme', 'demo', 'v1.0.0', 'v2.0.0') -> 'https://github.com/acme/demo/compare/v1.0.0...v2.0.0'
	('acme', 'demo', None, 'v1.0.0') -> 'https://github.com/acme/demo/commits/v1.0.0'
	"""
	if previous_tag:
		return f"{GITHUB_URL}/{owner}/{repo}/compare/{previous_tag}...{next_ref}"
	return f"{GITHUB_URL}/{owner}/{repo}/commits/{next_ref}"


def assemble_release_info(
	owner: str,
	repo: str,
	config: ReleaseConfig,
	pull_requests: list[PullRequest],
	categorized: CategorizedPullRequests,
	contributors: list[Contributor],
	last_release: Release | None,
	target_commitish: str,
	changelog_link: str,
	new_contributors_section: str = "",
	tag: str | None = None,
) -> ReleaseInfo:
	"""Substitute everything into the release template."""
	template = config.template
	for placeholder in FULL_CHANGELOG_PLACEHOLDERS:
		template = template.replace(placeholder, changelog_link)
	if NEW_CONTRIBUTORS_PLACEHOLDER in template and not new_contributors_section:
		# Also drop the blank line in front of the placeholder
		template = EMPTY_NEW_CONTRIBUTORS_PATTERN.sub("", template)

	versions = resolve_versions(last_release, pull_requests, config)
	body = render_placeholders(
		template,
		{
			"CHANGES": render_changes(categorized, config),
			"CONTRIBUTORS": render_contributors(contributors, config),
			"PREVIOUS_TAG": last_release.tag_name if last_release else "",
			"OWNER": owner,
			"REPOSITORY": repo,
			"NEW_CONTRIBUTORS": new_contributors_section,
			**versions,
		},
	)

	resolved_tag = tag or render_placeholders(config.tag_template, versions)
	name = render_placeholders(config.name_template, versions) or resolved_tag
	return ReleaseInfo(
		name=name,
		tag=resolved_tag,
		body=body,
		target_commitish=target_commitish,
		resolved_version=versions["RESOLVED_VERSION"],
		major_version=versions["MAJOR"],
		minor_version=versions["MINOR"],
		patch_version=versions["PATCH"],
	)
