"""Errors raised by gh_release_notes.

Every error that is meant to reach a caller derives from ``ReleaseNotesError``,
so that library users and the CLI can handle them in one place.
"""


class ReleaseNotesError(Exception):
	"""Base class for all errors raised by this package."""


class ConfigurationError(ReleaseNotesError):
	"""The release configuration is malformed or fails validation."""


class AuthenticationError(ReleaseNotesError):
	"""No usable GitHub credential could be resolved."""


class GitHubAPIError(ReleaseNotesError):
	"""A REST call returned a non-2xx status or a GraphQL call returned errors."""

	def __init__(self, message: str, status_code: int | None = None):
		self.status_code = status_code
		super().__init__(message)


class ContentLoadError(ReleaseNotesError):
	"""A config or template source could not be read."""


class ChecksumError(ContentLoadError):
	"""Loaded content does not match the expected checksum."""


class ContentSizeError(ContentLoadError):
	"""Remote content exceeds the size limit."""


class PaginationLimitError(ReleaseNotesError):
	"""A pagination loop exceeded its maximum number of rounds."""


class TemplateRenderError(ReleaseNotesError):
	"""A user template failed to render."""
