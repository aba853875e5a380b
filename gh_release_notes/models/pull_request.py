from dataclasses import dataclass, field, replace
from datetime import datetime

from ..constants import GITHUB_URL
from ._utils import parse_timestamp


@dataclass(frozen=True)
class Author:
	login: str
	type: str = "User"  # "User" or "Bot"
	url: str = ""
	avatar_url: str = ""
	sponsor_url: str | None = None

	@property
	def is_bot(self) -> bool:
		return self.type == "Bot"

	@property
	def search_login(self) -> str:
		"""Login as it has to appear in an ``author:`` search qualifier.

		Examples:
		'octocat' (User) -> 'octocat'
		'dependabot' (Bot) -> 'dependabot[bot]'
		"""
		if self.is_bot and not self.login.endswith("[bot]"):
			return f"{self.login}[bot]"
		return self.login

	def with_sponsor(self, sponsor_url: str) -> "Author":
		return replace(self, sponsor_url=sponsor_url)

	@classmethod
	def from_dict(cls, data: dict) -> "Author":
		"""Build an author from a GraphQL ``author`` node.

		The raw ``__typename`` is exposed as ``type``.
		"""
		listing = data.get("sponsorsListing") or {}
		return cls(
			login=data["login"],
			type=data.get("__typename") or data.get("type") or "User",
			url=data.get("url") or f"{GITHUB_URL}/{data['login']}",
			avatar_url=data.get("avatarUrl") or "",
			sponsor_url=listing.get("url"),
		)

	def to_dict(self) -> dict:
		return {
			"login": self.login,
			"type": self.type,
			"url": self.url,
			"avatarUrl": self.avatar_url,
			"sponsorsListing": {"url": self.sponsor_url} if self.sponsor_url else None,
		}


@dataclass(frozen=True)
class PullRequest:
	number: int
	title: str
	merged_at: str
	url: str = ""
	body: str | None = None
	base_ref_name: str | None = None
	head_ref_name: str | None = None
	additions: int | None = None
	deletions: int | None = None
	labels: tuple[str, ...] = field(default_factory=tuple)
	author: Author | None = None

	@property
	def merged_at_datetime(self) -> datetime:
		return parse_timestamp(self.merged_at)

	@property
	def author_login(self) -> str | None:
		return self.author.login if self.author else None

	def has_any_label(self, labels) -> bool:
		return any(label in labels for label in self.labels)

	def with_author(self, author: Author) -> "PullRequest":
		return replace(self, author=author)

	@classmethod
	def from_dict(cls, data: dict) -> "PullRequest":
		"""Build a pull request from a GraphQL search node.

		Label and author sub-objects are reshaped into flat values; duplicate
		label names are dropped while keeping their first position.
		"""
		label_nodes = (data.get("labels") or {}).get("nodes") or []
		labels = tuple(dict.fromkeys(node["name"] for node in label_nodes if node and node.get("name")))
		author = data.get("author")

		return cls(
			number=data["number"],
			title=data["title"],
			merged_at=data["mergedAt"],
			url=data.get("url") or "",
			body=data.get("body"),
			base_ref_name=data.get("baseRefName"),
			head_ref_name=data.get("headRefName"),
			additions=data.get("additions"),
			deletions=data.get("deletions"),
			labels=labels,
			author=Author.from_dict(author) if author and author.get("login") else None,
		)

	def to_dict(self) -> dict:
		return {
			"number": self.number,
			"title": self.title,
			"mergedAt": self.merged_at,
			"url": self.url,
			"body": self.body,
			"baseRefName": self.base_ref_name,
			"headRefName": self.head_ref_name,
			"additions": self.additions,
			"deletions": self.deletions,
			"labels": list(self.labels),
			"author": self.author.to_dict() if self.author else None,
		}
