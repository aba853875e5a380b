"""High-level API for library usage of gh_release_notes."""

from .core.config import GeneratorOptions, GitHubConfig, ReleaseNotesConfig
from .core.interfaces import NullProgressReporter, ProgressReporter
from .generator import ReleaseNotesGenerator
from .models import ReleaseResult


class ReleaseNotesClient:
	"""High-level client for generating release notes."""

	def __init__(
		self,
		config: ReleaseNotesConfig,
		progress_reporter: ProgressReporter | None = None,
	):
		self.config = config
		self.progress_reporter = progress_reporter or NullProgressReporter()

	def generate(self, owner: str, repo: str) -> ReleaseResult:
		"""Generate release notes and return the full structured result.

		Args:
			owner: Repository owner
			repo: Repository name
		"""
		generator = ReleaseNotesGenerator(self.config, self.progress_reporter)
		return generator.generate(owner, repo)

	def generate_release_notes(self, owner: str, repo: str) -> str:
		"""Generate release notes for a repository.

		Args:
			owner: Repository owner
			repo: Repository name

		Returns:
			The rendered release body as markdown
		"""
		return self.generate(owner, repo).release.body

	def render_template(self, owner: str, repo: str, template: str) -> str:
		"""Generate release notes and render them with a Jinja2 template.

		Args:
			owner: Repository owner
			repo: Repository name
			template: Path, https:// URL or pkg:github/... purl of the template
		"""
		generator = ReleaseNotesGenerator(self.config, self.progress_reporter)
		return generator.render_template(generator.generate(owner, repo), template)


class ReleaseNotesBuilder:
	"""Builder pattern for constructing ReleaseNotesClient."""

	def __init__(self):
		self._github_token = None
		self._api_url = None
		self._timeout = None
		self._config_source = None
		self._options = GeneratorOptions()
		self._progress_reporter = None

	def with_github_token(self, token: str) -> "ReleaseNotesBuilder":
		"""Set GitHub authentication token."""
		self._github_token = token
		return self

	def with_api_url(self, api_url: str) -> "ReleaseNotesBuilder":
		"""Use a GitHub Enterprise API endpoint."""
		self._api_url = api_url
		return self

	def with_timeout(self, timeout: float) -> "ReleaseNotesBuilder":
		self._timeout = timeout
		return self

	def with_config(self, source: str) -> "ReleaseNotesBuilder":
		"""Set the release config locator (path, https:// URL or pkg:github/... purl)."""
		self._config_source = source
		return self

	def with_range(
		self, tag: str | None = None, prev_tag: str | None = None, target: str | None = None
	) -> "ReleaseNotesBuilder":
		"""Set the release tag, the previous tag and the target commitish."""
		self._options.tag = tag
		self._options.prev_tag = prev_tag
		self._options.target = target
		return self

	def with_preview(self, preview: bool = True) -> "ReleaseNotesBuilder":
		self._options.preview = preview
		return self

	def with_sponsor_fetch_mode(self, mode: str) -> "ReleaseNotesBuilder":
		"""Set how sponsor links are fetched: none, graphql, html or auto."""
		self._options.sponsor_fetch_mode = mode
		return self

	def with_new_contributors(self, include: bool | None = True) -> "ReleaseNotesBuilder":
		"""Force (True), skip (False) or infer (None) new contributor detection."""
		self._options.include_new_contributors = include
		return self

	def with_extended_output(self, extended: bool = True) -> "ReleaseNotesBuilder":
		"""Fetch all PR fields, sponsor data and avatars for structured output."""
		self._options.extended_output = extended
		return self

	def with_progress_reporter(self, reporter: ProgressReporter) -> "ReleaseNotesBuilder":
		"""Set custom progress reporter."""
		self._progress_reporter = reporter
		return self

	def build(self) -> ReleaseNotesClient:
		"""Build the client with configured options.

		Raises:
			ValueError: If required configuration is missing or invalid
		"""
		if not self._github_token:
			raise ValueError("GitHub token is required")

		github_kwargs = {"token": self._github_token}
		if self._api_url:
			github_kwargs["api_url"] = self._api_url
		if self._timeout is not None:
			github_kwargs["timeout"] = self._timeout

		config = ReleaseNotesConfig(
			github=GitHubConfig(**github_kwargs),
			# Re-run validation on the collected options
			options=GeneratorOptions(**vars(self._options)),
			config_source=self._config_source,
		)
		return ReleaseNotesClient(config, self._progress_reporter)
