from .contributor import Contributor, NewContributor, NewContributorsResult
from .pull_request import Author, PullRequest
from .release import Release
from .release_config import Category, PlatformNativeConfig, ReleaseConfig
from .release_info import ReleaseInfo, ReleaseResult

__all__ = [
	"Author",
	"Category",
	"Contributor",
	"NewContributor",
	"NewContributorsResult",
	"PlatformNativeConfig",
	"PullRequest",
	"Release",
	"ReleaseConfig",
	"ReleaseInfo",
	"ReleaseResult",
]
