"""End-to-end tests of ReleaseNotesGenerator against a mocked GitHub client."""

import json
from unittest.mock import Mock

import pytest
import requests

from gh_release_notes.core.config import GeneratorOptions, GitHubConfig, ReleaseNotesConfig
from gh_release_notes.core.interfaces import ProgressReporter
from gh_release_notes.exceptions import ConfigurationError
from gh_release_notes.generator import ReleaseNotesGenerator

RELEASE_CONFIG = {
	"template": "## Changes\n\n$CHANGES\n\n$NEW_CONTRIBUTORS\n\n**Full Changelog**: $FULL_CHANGELOG_LINK",
	"categories": [
		{"title": "Features", "labels": ["feature"]},
		{"title": "Fixes", "labels": ["bug"]},
	],
	"exclude-labels": ["skip"],
	"tag-template": "v$RESOLVED_VERSION",
	"version-resolver": {"minor": {"labels": ["feature"]}},
}

RELEASE_YML = """
changelog:
  categories:
    - title: Everything
      labels: ["*"]
      exclude:
        authors: [alice]
"""


def _node(number, title, merged_at, labels, login, typename="User"):
	return {
		"number": number,
		"title": title,
		"mergedAt": merged_at,
		"url": f"https://github.com/acme/demo/pull/{number}",
		"labels": {"nodes": [{"name": label} for label in labels]},
		"author": {"login": login, "__typename": typename, "url": f"https://github.com/{login}"},
	}


SEARCH_NODES = [
	_node(1, "Add dark mode", "2024-01-10T00:00:00Z", ["feature"], "alice"),
	_node(3, "Internal cleanup", "2024-01-11T00:00:00Z", ["skip"], "alice"),
	_node(2, "Fix crash", "2024-01-12T00:00:00Z", ["bug"], "newbie"),
]


class FakeLoader:
	def __init__(self, contents):
		self.contents = contents

	def load(self, source):
		return self.contents[source]


def _client(releases=None, nodes=SEARCH_NODES, prior_counts=None):
	prior_counts = {"alice": 3, "newbie": 0} if prior_counts is None else prior_counts
	releases = [{"tag_name": "v1.0.0", "published_at": "2024-01-01T00:00:00Z"}] if releases is None else releases

	def graphql(query, variables=None):
		if "SearchMergedPRs" in query:
			return {"search": {"nodes": nodes, "pageInfo": {"hasNextPage": False, "endCursor": None}}}
		if "BatchCheckContributors" in query:
			return {login: {"issueCount": count} for login, count in prior_counts.items()}
		raise AssertionError(f"Unexpected query: {query}")

	client = Mock()
	client.get_repository.return_value = {"default_branch": "main"}
	client.iter_releases.side_effect = lambda owner, repo: iter(releases)
	client.get_matching_tag_refs.return_value = []
	client.graphql.side_effect = graphql
	client.get_user.return_value = {"avatar_url": "https://avatars.example.com/u/1?v=4"}
	return client


def _generator(client, token="ghp_test", loader_contents=None, config_source="release.json", **options):
	contents = {"release.json": json.dumps(RELEASE_CONFIG)} if loader_contents is None else loader_contents
	config = ReleaseNotesConfig(
		github=GitHubConfig(token=token),
		options=GeneratorOptions(**options),
		config_source=config_source,
	)
	return ReleaseNotesGenerator(config, client=client, content_loader=FakeLoader(contents))


def _search_variables(client):
	return next(c.args[1] for c in client.graphql.call_args_list if "SearchMergedPRs" in c.args[0])


class TestGenerate:
	def test_release_body(self):
		client = _client()
		result = _generator(client).generate("acme", "demo")

		assert result.release.body == (
			"## Changes\n\n"
			"## Features\n\n* Add dark mode (#1) @alice\n\n"
			"## Fixes\n\n* Fix crash (#2) @newbie\n\n"
			"## New Contributors\n"
			"* @newbie made their first contribution in https://github.com/acme/demo/pull/2\n\n"
			"**Full Changelog**: https://github.com/acme/demo/compare/v1.0.0...main"
		)
		assert result.release.tag == "v1.1.0"
		assert result.release.resolved_version == "1.1.0"
		assert result.default_branch == "main"
		assert result.last_release.tag_name == "v1.0.0"
		assert [pr.number for pr in result.pull_requests] == [2, 1]
		assert [c.login for c in result.contributors] == ["newbie", "alice"]
		assert [c.login for c in result.new_contributors.new_contributors] == ["newbie"]

	def test_search_query(self):
		client = _client()
		_generator(client).generate("acme", "demo")

		variables = _search_variables(client)
		assert "base:main" in variables["q"]
		assert "merged:2024-01-01T00:00:00Z..*" in variables["q"]
		assert '-label:"skip"' in variables["q"]
		assert variables["withSponsor"] is False
		assert variables["withBody"] is False

	def test_sha_target_has_no_base_branch(self):
		client = _client()
		result = _generator(client, target="0a1b2c3d4e5f").generate("acme", "demo")

		assert "base:" not in _search_variables(client)["q"]
		assert result.target_commitish == "0a1b2c3d4e5f"

	def test_first_release(self):
		client = _client(releases=[])
		result = _generator(client).generate("acme", "demo")

		assert result.last_release is None
		assert result.new_contributors is None
		assert result.full_changelog_link == "https://github.com/acme/demo/commits/main"
		assert result.release.tag == "v0.1.0"
		assert "New Contributors" not in result.release.body
		assert all("BatchCheckContributors" not in c.args[0] for c in client.graphql.call_args_list)

	def test_skip_new_contributors(self):
		client = _client()
		result = _generator(client, include_new_contributors=False).generate("acme", "demo")

		assert result.new_contributors is None
		assert "New Contributors" not in result.release.body
		assert all("BatchCheckContributors" not in c.args[0] for c in client.graphql.call_args_list)

	def test_explicit_tag_and_preview_link(self):
		client = _client()
		result = _generator(client, tag="v1.1.0", target="release/1.x", preview=True).generate("acme", "demo")

		assert result.release.tag == "v1.1.0"
		assert result.full_changelog_link == "https://github.com/acme/demo/compare/v1.0.0...release/1.x"
		assert "base:release/1.x" in _search_variables(client)["q"]

	def test_platform_config_warnings_are_reported(self):
		client = _client()
		reporter = Mock(spec=ProgressReporter)
		config = ReleaseNotesConfig(
			github=GitHubConfig(token="ghp_test"),
			config_source="release.yml",
		)
		generator = ReleaseNotesGenerator(
			config, reporter, client=client, content_loader=FakeLoader({"release.yml": RELEASE_YML})
		)
		result = generator.generate("acme", "demo")

		warnings = [c.args[0] for c in reporter.report.call_args_list if c.args[0].type == "warning"]
		assert len(warnings) == 1
		assert "Everything" in warnings[0].message
		assert result.warnings == [warnings[0].message]
		assert result.release.body.startswith("## What's Changed\n\n### Everything\n\n- Fix crash by @newbie in #2")

	def test_default_config_when_nothing_is_found(self, tmp_path, monkeypatch):
		monkeypatch.chdir(tmp_path)
		client = _client(nodes=[SEARCH_NODES[0]])
		result = _generator(client, config_source=None).generate("acme", "demo")

		assert result.release.body == (
			"## What's Changed\n\n- Add dark mode by @alice in #1\n\n"
			"**Full Changelog**: https://github.com/acme/demo/compare/v1.0.0...main"
		)


class TestExtendedOutput:
	def test_graphql_sponsors_and_avatars(self):
		client = _client()
		result = _generator(client, extended_output=True).generate("acme", "demo")

		variables = _search_variables(client)
		assert variables["withSponsor"] is True
		assert variables["withBody"] is True
		assert result.contributors[0].author.avatar_url == "https://github.com/newbie.png?size=64"

		data = result.to_dict()
		json.dumps(data)
		assert data["release"]["tag"] == "v1.1.0"
		assert data["lastRelease"]["tag_name"] == "v1.0.0"
		assert [pr["number"] for pr in data["categorizedPullRequests"]["categories"][0]["pullRequests"]] == [1]

	def test_html_sponsors_for_app_tokens(self):
		client = _client()
		session = Mock(spec=requests.Session)
		session.head.side_effect = lambda url, **kwargs: Mock(status_code=200 if url.endswith("/alice") else 302)
		config = ReleaseNotesConfig(
			github=GitHubConfig(token="ghs_installation"),
			options=GeneratorOptions(extended_output=True),
			config_source="release.json",
		)
		generator = ReleaseNotesGenerator(
			config,
			client=client,
			content_loader=FakeLoader({"release.json": json.dumps(RELEASE_CONFIG)}),
			sponsor_session=session,
		)
		result = generator.generate("acme", "demo")

		assert _search_variables(client)["withSponsor"] is False
		sponsors = {c.login: c.author.sponsor_url for c in result.contributors}
		assert sponsors == {"newbie": None, "alice": "https://github.com/sponsors/alice"}
		assert result.categorized.categories[0].pull_requests[0].author.sponsor_url == (
			"https://github.com/sponsors/alice"
		)

	def test_render_template(self, tmp_path, monkeypatch):
		monkeypatch.chdir(tmp_path)
		client = _client()
		generator = ReleaseNotesGenerator(
			ReleaseNotesConfig(
				github=GitHubConfig(token="ghp_test"),
				options=GeneratorOptions(extended_output=True),
				config_source="release.json",
			),
			client=client,
			content_loader=FakeLoader(
				{
					"release.json": json.dumps(RELEASE_CONFIG),
					"notes.jinja": "{{ release.tag }} has {{ pullRequests | length }} PRs since {{ lastRelease.tag_name }}",
				}
			),
		)
		result = generator.generate("acme", "demo")
		assert generator.render_template(result, "notes.jinja") == "v1.1.0 has 2 PRs since v1.0.0"


def test_invalid_config_fails_before_api_calls():
	client = _client()
	generator = _generator(client, loader_contents={"release.json": json.dumps({"categories": []})})
	with pytest.raises(ConfigurationError):
		generator.generate("acme", "demo")
	client.get_repository.assert_not_called()
