from dataclasses import dataclass
from datetime import datetime

from ._utils import parse_timestamp


@dataclass(frozen=True)
class Release:
	"""A published release as returned by the REST API.

	Used as the previous-release boundary of a run.
	"""

	tag_name: str
	id: int | None = None
	name: str | None = None
	created_at: str | None = None
	published_at: str | None = None
	prerelease: bool = False
	draft: bool = False
	target_commitish: str | None = None

	@property
	def boundary_date(self) -> str | None:
		"""Timestamp used as the lower bound of the PR search and the new-contributor cutoff."""
		return self.published_at or self.created_at

	@property
	def boundary_datetime(self) -> datetime | None:
		date = self.boundary_date
		return parse_timestamp(date) if date else None

	@classmethod
	def from_dict(cls, data: dict) -> "Release":
		return cls(
			tag_name=data["tag_name"],
			id=data.get("id"),
			name=data.get("name"),
			created_at=data.get("created_at"),
			published_at=data.get("published_at"),
			prerelease=bool(data.get("prerelease")),
			draft=bool(data.get("draft")),
			target_commitish=data.get("target_commitish"),
		)

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"tag_name": self.tag_name,
			"name": self.name,
			"created_at": self.created_at,
			"published_at": self.published_at,
			"prerelease": self.prerelease,
		}
