from dataclasses import dataclass

from .pull_request import Author, PullRequest


@dataclass(frozen=True)
class Contributor:
	author: Author

	@property
	def login(self) -> str:
		return self.author.login

	@property
	def is_bot(self) -> bool:
		return self.author.is_bot

	def to_dict(self) -> dict:
		return {
			"login": self.author.login,
			"isBot": self.author.is_bot,
			"url": self.author.url,
			"avatarUrl": self.author.avatar_url,
			"sponsorsListing": {"url": self.author.sponsor_url} if self.author.sponsor_url else None,
		}


@dataclass(frozen=True)
class NewContributor:
	login: str
	is_bot: bool
	first_pull_request: PullRequest

	def to_dict(self) -> dict:
		return {
			"login": self.login,
			"isBot": self.is_bot,
			"firstPullRequest": {
				"number": self.first_pull_request.number,
				"title": self.first_pull_request.title,
				"url": self.first_pull_request.url,
				"mergedAt": self.first_pull_request.merged_at,
			},
		}


@dataclass
class NewContributorsResult:
	new_contributors: list[NewContributor]
	total_contributors: int
	api_calls_used: int

	def to_dict(self) -> dict:
		return {
			"newContributors": [contributor.to_dict() for contributor in self.new_contributors],
			"totalContributors": self.total_contributors,
			"apiCallsUsed": self.api_calls_used,
		}
