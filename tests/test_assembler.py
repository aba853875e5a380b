"""Tests for rendering the release body."""

from gh_release_notes.assembler import (
	assemble_release_info,
	changelog_ref,
	escape_title,
	full_changelog_link,
	render_changes,
	render_contributors,
	render_placeholders,
	resolve_versions,
)
from gh_release_notes.categorize import categorize_pull_requests
from gh_release_notes.contributors import build_contributors
from gh_release_notes.models import Author, Contributor, PullRequest, Release, ReleaseConfig


def _pr(number, title="Change", labels=(), login="alice", **extra):
	return PullRequest(
		number=number,
		title=title,
		merged_at="2024-01-01T00:00:00Z",
		url=f"https://github.com/acme/demo/pull/{number}",
		labels=tuple(labels),
		author=Author(login=login, url=f"https://github.com/{login}") if login else None,
		**extra,
	)


def _config(**kwargs):
	return ReleaseConfig.from_dict({"template": "$CHANGES", **kwargs})


class TestPlaceholders:
	def test_unknown_placeholders_are_kept(self):
		assert render_placeholders("$A and $B", {"A": "1"}) == "1 and $B"

	def test_single_pass(self):
		assert render_placeholders("$TITLE", {"TITLE": "uses $NUMBER", "NUMBER": "7"}) == "uses $NUMBER"

	def test_change_template(self):
		config = _config(**{"change-template": "- $TITLE @$AUTHOR ($BASE_REF_NAME <- $HEAD_REF_NAME) $URL"})
		pr = _pr(5, base_ref_name="main", head_ref_name="feature")
		categorized = categorize_pull_requests([pr], config)
		assert render_changes(categorized, config) == (
			"- Change @alice (main <- feature) https://github.com/acme/demo/pull/5"
		)

	def test_missing_author_is_ghost(self):
		config = _config()
		categorized = categorize_pull_requests([_pr(1, login=None)], config)
		assert render_changes(categorized, config) == "* Change (#1) @ghost"


class TestEscapeTitle:
	def test_mentions_and_references(self):
		assert escape_title("Thanks @me for #1", "@#") == "Thanks @<!---->me for #<!---->1"

	def test_backslash_escape(self):
		assert escape_title("a_b*c", "_*") == "a\\_b\\*c"

	def test_code_spans_untouched(self):
		assert escape_title("Fix `a_b` for @me", "_@") == "Fix `a_b` for @<!---->me"

	def test_no_escapes(self):
		assert escape_title("a_b", "") == "a_b"


class TestRenderChanges:
	def test_no_changes(self):
		config = _config(**{"no-changes-template": "Nothing"})
		assert render_changes(categorize_pull_requests([], config), config) == "Nothing"

	def test_uncategorized_first_then_categories(self):
		config = _config(
			categories=[
				{"title": "Features", "labels": ["feature"]},
				{"title": "Empty", "labels": ["nothing"]},
				{"title": "Bugs", "labels": ["bug"]},
			]
		)
		prs = [_pr(1, "One", ["feature"]), _pr(2, "Two"), _pr(3, "Three", ["bug"])]
		assert render_changes(categorize_pull_requests(prs, config), config) == (
			"* Two (#2) @alice\n\n"
			"## Features\n\n* One (#1) @alice\n\n"
			"## Bugs\n\n* Three (#3) @alice"
		)

	def test_collapse_after(self):
		config = _config(categories=[{"title": "Deps", "labels": ["deps"], "collapse-after": 1}])
		prs = [_pr(1, "a", ["deps"]), _pr(2, "b", ["deps"])]
		assert render_changes(categorize_pull_requests(prs, config), config) == (
			"## Deps\n\n<details>\n<summary>2 changes</summary>\n\n* a (#1) @alice\n* b (#2) @alice\n</details>"
		)

	def test_collapse_after_not_exceeded(self):
		config = _config(categories=[{"title": "Deps", "labels": ["deps"], "collapse-after": 2}])
		prs = [_pr(1, "a", ["deps"]), _pr(2, "b", ["deps"])]
		assert "<details>" not in render_changes(categorize_pull_requests(prs, config), config)


class TestRenderContributors:
	def test_sentence(self):
		contributors = [Contributor(Author(login=login)) for login in ("a", "b", "c")]
		assert render_contributors(contributors, _config()) == "@a, @b and @c"

	def test_single(self):
		assert render_contributors([Contributor(Author(login="a"))], _config()) == "@a"

	def test_bots_are_linked(self):
		bot = Contributor(Author(login="dependabot", type="Bot", url="https://github.com/apps/dependabot"))
		assert render_contributors([Contributor(Author(login="a")), bot], _config()) == (
			"@a and [dependabot[bot]](https://github.com/apps/dependabot)"
		)

	def test_excluded_and_empty(self):
		config = _config(**{"exclude-contributors": ["a"], "no-contributors-template": "Nobody"})
		assert render_contributors([Contributor(Author(login="a"))], config) == "Nobody"


class TestVersions:
	def test_default_patch_bump(self):
		versions = resolve_versions(Release(tag_name="v1.2.3"), [], _config())
		assert versions["RESOLVED_VERSION"] == "1.2.4"
		assert versions["NEXT_MAJOR_VERSION"] == "2.0.0"
		assert versions["NEXT_MINOR_VERSION"] == "1.3.0"
		assert versions["NEXT_PATCH_VERSION"] == "1.2.4"

	def test_label_driven_bump(self):
		config = _config(**{"version-resolver": {"major": {"labels": ["breaking"]}, "minor": {"labels": ["feature"]}}})
		prs = [_pr(1, labels=["feature"]), _pr(2, labels=["breaking"])]
		versions = resolve_versions(Release(tag_name="v1.2.3"), prs, config)
		assert versions["RESOLVED_VERSION"] == "2.0.0"
		assert (versions["MAJOR"], versions["MINOR"], versions["PATCH"]) == ("2", "0", "0")

	def test_tag_prefix_and_version_template(self):
		config = _config(**{"tag-prefix": "release-", "version-template": "$MAJOR.$MINOR"})
		versions = resolve_versions(Release(tag_name="release-3.4.0"), [], config)
		assert versions["RESOLVED_VERSION"] == "3.4"

	def test_no_or_unparsable_release(self):
		assert resolve_versions(None, [], _config())["RESOLVED_VERSION"] == "0.0.1"
		assert resolve_versions(Release(tag_name="latest"), [], _config())["RESOLVED_VERSION"] == "0.0.1"


class TestChangelogLink:
	def test_compare_link(self):
		assert full_changelog_link("acme", "demo", "v1.0.0", "v2.0.0") == (
			"https://github.com/acme/demo/compare/v1.0.0...v2.0.0"
		)

	def test_commits_link_without_previous_tag(self):
		assert full_changelog_link("acme", "demo", None, "main") == "https://github.com/acme/demo/commits/main"

	def test_changelog_ref(self):
		assert changelog_ref("v2.0.0", "main", "trunk") == "v2.0.0"
		assert changelog_ref("v2.0.0", "main", "trunk", preview=True) == "main"
		assert changelog_ref(None, None, "trunk") == "trunk"
		assert changelog_ref("v2.0.0", None, "trunk", preview=True) == "v2.0.0"


class TestAssembleReleaseInfo:
	def _assemble(self, config, prs, new_contributors_section="", last_release=None, tag=None):
		return assemble_release_info(
			"acme",
			"demo",
			config,
			prs,
			categorize_pull_requests(prs, config),
			build_contributors(prs),
			last_release,
			"main",
			"https://github.com/acme/demo/compare/v1.0.0...main",
			new_contributors_section=new_contributors_section,
			tag=tag,
		)

	def test_full_body(self):
		config = ReleaseConfig.from_dict(
			{
				"template": (
					"$OWNER/$REPOSITORY since $PREVIOUS_TAG\n\n$CHANGES\n\nThanks $CONTRIBUTORS\n\n"
					"**Full Changelog**: ${FULL_CHANGELOG_LINK}"
				),
				"name-template": "v$RESOLVED_VERSION",
				"tag-template": "v$RESOLVED_VERSION",
			}
		)
		info = self._assemble(config, [_pr(1, "Fix"), _pr(2, "Add", login="bob")], last_release=Release(tag_name="v1.0.0"))

		assert info.body == (
			"acme/demo since v1.0.0\n\n* Fix (#1) @alice\n* Add (#2) @bob\n\nThanks @alice and @bob\n\n"
			"**Full Changelog**: https://github.com/acme/demo/compare/v1.0.0...main"
		)
		assert info.name == "v1.0.1"
		assert info.tag == "v1.0.1"
		assert info.resolved_version == "1.0.1"
		assert info.target_commitish == "main"

	def test_empty_new_contributors_removed(self):
		config = ReleaseConfig.from_dict({"template": "$CHANGES\n\n$NEW_CONTRIBUTORS\n\nEnd"})
		info = self._assemble(config, [_pr(1, "Fix")])
		assert info.body == "* Fix (#1) @alice\n\nEnd"

	def test_new_contributors_section(self):
		config = ReleaseConfig.from_dict({"template": "$CHANGES\n\n$NEW_CONTRIBUTORS"})
		section = "## New Contributors\n* @alice made their first contribution in https://github.com/acme/demo/pull/1"
		info = self._assemble(config, [_pr(1, "Fix")], new_contributors_section=section)
		assert info.body.endswith(section)

	def test_explicit_tag_and_name_fallback(self):
		info = self._assemble(_config(), [], tag="v9.0.0")
		assert info.tag == "v9.0.0"
		assert info.name == "v9.0.0"
