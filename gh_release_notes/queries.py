"""GraphQL documents used against the GitHub API."""

import re

SEARCH_MERGED_PRS = """
query SearchMergedPRs(
	$q: String!
	$withBody: Boolean!
	$withURL: Boolean!
	$withBase: Boolean!
	$withHead: Boolean!
	$withSponsor: Boolean!
	$after: String
) {
	search(query: $q, type: ISSUE, first: 100, after: $after) {
		pageInfo { hasNextPage endCursor }
		nodes {
			... on PullRequest {
				number
				title
				mergedAt
				additions
				deletions
				url @include(if: $withURL)
				body @include(if: $withBody)
				baseRefName @include(if: $withBase)
				headRefName @include(if: $withHead)
				labels(first: 100) { nodes { name } }
				author {
					login
					__typename
					url
					avatarUrl
					... on User { sponsorsListing @include(if: $withSponsor) { url } }
				}
			}
		}
	}
}
"""

_NON_IDENTIFIER = re.compile(r"[^a-zA-Z0-9_]")


def login_alias(login: str) -> str:
	"""Return a GraphQL alias for a login.

	Examples:
	'octo-cat' -> 'octo_cat'
	'42user' -> 'u_42user'
	"""
	alias = _NON_IDENTIFIER.sub("_", login)
	if login[:1].isdigit():
		return f"u_{alias}"
	return alias


def build_prior_prs_query(owner: str, repo: str, search_logins: list[tuple[str, str]], before: str) -> str:
	"""Build one query with an aliased search per contributor.

	``search_logins`` holds ``(alias, search_login)`` pairs. Each search counts
	the merged PRs of that login strictly before ``before``.
	"""
	searches = "\n".join(
		f"""
	{alias}: search(
		query: "repo:{owner}/{repo} is:pr is:merged author:{search_login} merged:<{before}"
		type: ISSUE
		first: 1
	) {{
		issueCount
	}}"""
		for alias, search_login in search_logins
	)
	return f"query BatchCheckContributors {{{searches}\n}}"


def build_pr_files_query(pr_numbers: list[int]) -> str:
	"""Build a query fetching one page of changed files for each PR.

	Every PR gets its own cursor variable ``$after_pr_<number>``.
	"""
	variables = ", ".join(f"$after_pr_{number}: String" for number in pr_numbers)
	selections = "\n".join(
		f"""
		pr_{number}: pullRequest(number: {number}) {{
			files(first: 100, after: $after_pr_{number}) {{
				pageInfo {{ hasNextPage endCursor }}
				nodes {{ path previousFilePath }}
			}}
		}}"""
		for number in pr_numbers
	)
	return f"""
query FilesForPRs($owner: String!, $name: String!, {variables}) {{
	repo: repository(owner: $owner, name: $name) {{{selections}
	}}
}}
"""
