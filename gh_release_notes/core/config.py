from dataclasses import dataclass, field

from ..constants import GITHUB_API_URL, REQUEST_TIMEOUT, USER_AGENT

SPONSOR_FETCH_MODES = ("none", "graphql", "html", "auto")


@dataclass
class GitHubConfig:
	token: str
	api_url: str = GITHUB_API_URL
	user_agent: str = USER_AGENT
	timeout: float = REQUEST_TIMEOUT

	def __post_init__(self):
		if not self.token:
			raise ValueError("GitHub token is required")
		if self.timeout <= 0:
			raise ValueError(f"Invalid timeout: {self.timeout}")


@dataclass
class GeneratorOptions:
	"""Per-run options.

	Attributes:
		prev_tag: Tag of the previous release. Detected automatically if None.
		tag: Tag of the release being prepared.
		target: Branch or commitish the release is cut from (default branch if None).
		preview: Point the full changelog link at the target instead of the tag.
		sponsor_fetch_mode: One of "none", "graphql", "html" or "auto".
		include_new_contributors: True to always detect new contributors, False to
			never, None to detect them only when the output needs them.
		extended_output: Produce the structured result (JSON/template rendering)
			including sponsor data and all PR fields.
	"""

	prev_tag: str | None = None
	tag: str | None = None
	target: str | None = None
	preview: bool = False
	sponsor_fetch_mode: str = "auto"
	include_new_contributors: bool | None = None
	extended_output: bool = False

	def __post_init__(self):
		if self.sponsor_fetch_mode not in SPONSOR_FETCH_MODES:
			raise ValueError(f"Invalid sponsor fetch mode: {self.sponsor_fetch_mode}")


@dataclass
class ReleaseNotesConfig:
	github: GitHubConfig
	options: GeneratorOptions = field(default_factory=GeneratorOptions)
	# Locator of the release config (path, https:// URL or pkg:github/... purl)
	config_source: str | None = None
