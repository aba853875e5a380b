from gh_release_notes.models import Author, NewContributor, PullRequest
from gh_release_notes.new_contributors import find_new_contributors, format_new_contributors_section
from gh_release_notes.queries import build_prior_prs_query, login_alias


def _pr(number, login, merged_at="2024-02-01T00:00:00Z", type="User"):
	return PullRequest(
		number=number,
		title=f"PR {number}",
		merged_at=merged_at,
		url=f"https://github.com/acme/demo/pull/{number}",
		author=Author(login=login, type=type),
	)


class FakeGraphQL:
	"""Answer batched prior-PR queries from a ``{login: count}`` map."""

	def __init__(self, prior_counts):
		self.prior_counts = prior_counts
		self.queries = []

	def __call__(self, query, variables=None):
		self.queries.append(query)
		return {
			login_alias(login): {"issueCount": count}
			for login, count in self.prior_counts.items()
			if f"author:{login}" in query or f"author:{login}[bot]" in query
		}


def test_login_alias():
	assert login_alias("octo-cat") == "octo_cat"
	assert login_alias("42user") == "u_42user"


def test_prior_prs_query_uses_cutoff():
	query = build_prior_prs_query("acme", "demo", [("alice", "alice")], "2024-01-01T00:00:00Z")
	assert "alice: search(" in query
	assert "author:alice merged:<2024-01-01T00:00:00Z" in query


def test_find_new_contributors():
	prs = [
		_pr(3, "newbie", merged_at="2024-02-03T00:00:00Z"),
		_pr(1, "veteran"),
		_pr(2, "newbie", merged_at="2024-02-02T00:00:00Z"),
		_pr(4, "another-one"),
	]
	graphql = FakeGraphQL({"newbie": 0, "veteran": 12, "another-one": 0})
	result = find_new_contributors(graphql, "acme", "demo", prs, "2024-01-01T00:00:00Z")

	assert [c.login for c in result.new_contributors] == ["another-one", "newbie"]
	assert result.new_contributors[1].first_pull_request.number == 2
	assert result.total_contributors == 3
	# one PR page plus one batch
	assert result.api_calls_used == 2


def test_single_prior_pr_is_not_new():
	prs = [
		_pr(7, "returning", merged_at="2024-01-01T00:00:00Z"),
		_pr(8, "newuser", merged_at="2024-01-01T00:00:00Z"),
	]
	graphql = FakeGraphQL({"returning": 1, "newuser": 0})
	result = find_new_contributors(graphql, "acme", "demo", prs, "2023-12-01T00:00:00Z")

	assert [c.login for c in result.new_contributors] == ["newuser"]
	assert result.new_contributors[0].first_pull_request.number == 8
	assert "merged:<2023-12-01T00:00:00Z" in graphql.queries[0]


def test_bots_are_searched_with_suffix():
	graphql = FakeGraphQL({"dependabot": 0})
	result = find_new_contributors(
		graphql, "acme", "demo", [_pr(1, "dependabot", type="Bot")], "2024-01-01T00:00:00Z"
	)
	assert "author:dependabot[bot]" in graphql.queries[0]
	assert result.new_contributors[0].is_bot


def test_batches():
	prs = [_pr(i, f"user{i}") for i in range(25)]
	graphql = FakeGraphQL({f"user{i}": 1 for i in range(25)})
	result = find_new_contributors(graphql, "acme", "demo", prs, "2024-01-01T00:00:00Z", batch_size=10)

	assert len(graphql.queries) == 3
	assert result.new_contributors == []
	assert result.api_calls_used == 1 + 3


def test_missing_search_result_is_not_new():
	graphql = FakeGraphQL({})
	result = find_new_contributors(graphql, "acme", "demo", [_pr(1, "ghosty")], "2024-01-01T00:00:00Z")
	assert result.new_contributors == []
	assert result.total_contributors == 1


def test_format_section():
	contributors = [
		NewContributor(login="alice", is_bot=False, first_pull_request=_pr(5, "alice")),
		NewContributor(login="bot", is_bot=True, first_pull_request=_pr(6, "bot")),
	]
	section = format_new_contributors_section(contributors, exclude_contributors=["bot"])
	assert section == (
		"## New Contributors\n"
		"* @alice made their first contribution in https://github.com/acme/demo/pull/5"
	)


def test_format_section_empty():
	assert format_new_contributors_section([]) == ""
