"""gh-release-notes - Generate release notes from merged GitHub pull requests."""

# Public API exports for library usage
from .api import ReleaseNotesBuilder, ReleaseNotesClient
from .core.config import GeneratorOptions, GitHubConfig, ReleaseNotesConfig
from .core.interfaces import (
	CollectingProgressReporter,
	CompositeProgressReporter,
	NullProgressReporter,
	ProgressEvent,
	ProgressReporter,
)
from .exceptions import (
	AuthenticationError,
	ChecksumError,
	ConfigurationError,
	ContentLoadError,
	ContentSizeError,
	GitHubAPIError,
	PaginationLimitError,
	ReleaseNotesError,
	TemplateRenderError,
)
from .models import ReleaseConfig, ReleaseResult

__version__ = "0.1.0"

__all__ = [
	# Client classes
	"ReleaseNotesBuilder",
	"ReleaseNotesClient",
	# Configuration
	"ReleaseNotesConfig",
	"GitHubConfig",
	"GeneratorOptions",
	"ReleaseConfig",
	"ReleaseResult",
	# Progress reporting
	"ProgressReporter",
	"ProgressEvent",
	"NullProgressReporter",
	"CompositeProgressReporter",
	"CollectingProgressReporter",
	# Errors
	"ReleaseNotesError",
	"ConfigurationError",
	"AuthenticationError",
	"GitHubAPIError",
	"ContentLoadError",
	"ChecksumError",
	"ContentSizeError",
	"PaginationLimitError",
	"TemplateRenderError",
]
