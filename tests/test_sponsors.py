"""Tests for sponsor fetch mode selection and sponsor page probing."""

from unittest.mock import Mock

import pytest
import requests

from gh_release_notes.core.execution import SequentialStrategy
from gh_release_notes.models import Author, PullRequest
from gh_release_notes.sponsors import (
	check_sponsor_page,
	enrich_with_html_sponsor_data,
	resolve_sponsor_fetch_mode,
)


def _pr(number, login, type="User"):
	return PullRequest(
		number=number,
		title=f"PR {number}",
		merged_at="2024-01-01T00:00:00Z",
		author=Author(login=login, type=type),
	)


def _session(statuses):
	"""Mock session answering HEAD requests by login."""
	session = Mock(spec=requests.Session)

	def head(url, allow_redirects=True, timeout=None):
		status = statuses[url.rsplit("/", 1)[1]]
		if isinstance(status, Exception):
			raise status
		return Mock(status_code=status)

	session.head.side_effect = head
	return session


class TestResolveSponsorFetchMode:
	def test_explicit_modes_pass_through(self):
		for mode in ("none", "graphql", "html"):
			assert resolve_sponsor_fetch_mode(mode, "ghp_token", extended_output=False) == mode

	def test_auto_without_extended_output(self):
		assert resolve_sponsor_fetch_mode("auto", "ghp_token", extended_output=False) == "none"

	def test_auto_with_user_token(self):
		assert resolve_sponsor_fetch_mode("auto", "ghp_token", extended_output=True) == "graphql"

	def test_auto_with_app_installation_token(self):
		assert resolve_sponsor_fetch_mode("auto", "ghs_token", extended_output=True) == "html"

	def test_invalid_mode(self):
		with pytest.raises(ValueError):
			resolve_sponsor_fetch_mode("always", "ghp_token", extended_output=True)


class TestCheckSponsorPage:
	def test_page_exists(self):
		result = check_sponsor_page(_session({"alice": 200}), "alice")
		assert result.sponsor_url == "https://github.com/sponsors/alice"
		assert not result.has_error

	def test_redirect_means_no_page(self):
		session = _session({"alice": 302})
		result = check_sponsor_page(session, "alice")
		assert result.sponsor_url is None
		assert not result.has_error
		assert session.head.call_args.kwargs["allow_redirects"] is False

	def test_not_found(self):
		result = check_sponsor_page(_session({"alice": 404}), "alice")
		assert result.sponsor_url is None
		assert not result.has_error

	def test_rate_limited_is_an_error(self):
		assert check_sponsor_page(_session({"alice": 429}), "alice").has_error

	def test_server_error_is_not_counted(self):
		result = check_sponsor_page(_session({"alice": 503}), "alice")
		assert result.sponsor_url is None
		assert not result.has_error

	def test_network_error(self):
		result = check_sponsor_page(_session({"alice": requests.ConnectionError("down")}), "alice")
		assert result.has_error


class TestEnrichWithHTMLSponsorData:
	def test_sets_sponsor_urls(self):
		prs = [_pr(1, "alice"), _pr(2, "bob"), _pr(3, "alice"), _pr(4, "dependabot", type="Bot")]
		session = _session({"alice": 200, "bob": 302})

		enriched = enrich_with_html_sponsor_data(prs, session=session, strategy=SequentialStrategy())

		assert enriched[0].author.sponsor_url == "https://github.com/sponsors/alice"
		assert enriched[2].author.sponsor_url == "https://github.com/sponsors/alice"
		assert enriched[1].author.sponsor_url is None
		# unique users only, bots are never probed
		assert session.head.call_count == 2

	def test_too_many_errors_discards_everything(self):
		logins = [f"user{i}" for i in range(8)]
		prs = [_pr(i, login) for i, login in enumerate(logins)]
		statuses = {login: 429 for login in logins}
		statuses["user0"] = 200
		session = _session(statuses)

		enriched = enrich_with_html_sponsor_data(
			prs, session=session, strategy=SequentialStrategy(), max_concurrency=2, max_errors=3
		)

		assert enriched is prs
		# stops after the batch that crossed the limit
		assert session.head.call_count == 6

	def test_errors_below_limit_keep_results(self):
		prs = [_pr(1, "alice"), _pr(2, "bob")]
		session = _session({"alice": 200, "bob": 429})
		enriched = enrich_with_html_sponsor_data(prs, session=session, strategy=SequentialStrategy())
		assert enriched[0].author.sponsor_url == "https://github.com/sponsors/alice"
		assert enriched[1].author.sponsor_url is None
