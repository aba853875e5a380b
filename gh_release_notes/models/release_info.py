from dataclasses import dataclass, field

from .contributor import Contributor, NewContributorsResult
from .pull_request import PullRequest
from .release import Release
from .release_config import Category


@dataclass
class CategoryGroup:
	category: Category
	pull_requests: list[PullRequest] = field(default_factory=list)

	def to_dict(self) -> dict:
		return {
			"title": self.category.title,
			"labels": list(self.category.labels),
			"collapse_after": self.category.collapse_after,
			"pullRequests": [pr.to_dict() for pr in self.pull_requests],
		}


@dataclass
class CategorizedPullRequests:
	uncategorized: list[PullRequest] = field(default_factory=list)
	categories: list[CategoryGroup] = field(default_factory=list)

	def to_dict(self) -> dict:
		return {
			"uncategorized": [pr.to_dict() for pr in self.uncategorized],
			"categories": [group.to_dict() for group in self.categories],
		}


@dataclass
class ReleaseInfo:
	name: str
	tag: str
	body: str
	target_commitish: str
	resolved_version: str
	major_version: str
	minor_version: str
	patch_version: str

	def to_dict(self) -> dict:
		return {
			"name": self.name,
			"tag": self.tag,
			"body": self.body,
			"targetCommitish": self.target_commitish,
			"resolvedVersion": self.resolved_version,
			"majorVersion": self.major_version,
			"minorVersion": self.minor_version,
			"patchVersion": self.patch_version,
		}


@dataclass
class ReleaseResult:
	"""Everything produced by one release-notes run."""

	owner: str
	repo: str
	default_branch: str
	target_commitish: str
	release: ReleaseInfo
	pull_requests: list[PullRequest]
	categorized: CategorizedPullRequests
	contributors: list[Contributor]
	new_contributors: NewContributorsResult | None
	last_release: Release | None
	full_changelog_link: str
	warnings: list[str] = field(default_factory=list)

	def to_dict(self) -> dict:
		return {
			"owner": self.owner,
			"repo": self.repo,
			"defaultBranch": self.default_branch,
			"targetCommitish": self.target_commitish,
			"release": self.release.to_dict(),
			"pullRequests": [pr.to_dict() for pr in self.pull_requests],
			"categorizedPullRequests": self.categorized.to_dict(),
			"contributors": [contributor.to_dict() for contributor in self.contributors],
			"newContributors": self.new_contributors.to_dict() if self.new_contributors else None,
			"lastRelease": self.last_release.to_dict() if self.last_release else None,
			"fullChangelogLink": self.full_changelog_link,
		}
