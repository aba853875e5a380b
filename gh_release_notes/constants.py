GITHUB_API_URL = "https://api.github.com"
GITHUB_URL = "https://github.com"
USER_AGENT = "gh-release-notes"
REQUEST_TIMEOUT = 30.0

# Change template matching GitHub's generated release notes
GITHUB_STYLE_CHANGE_TEMPLATE = "- $TITLE by @$AUTHOR in #$NUMBER"
GITHUB_STYLE_CATEGORY_TEMPLATE = "### $TITLE"

DEFAULT_RELEASE_TEMPLATE = (
	"## What's Changed\n\n$CHANGES\n\n$NEW_CONTRIBUTORS\n\n"
	"**Full Changelog**: $FULL_CHANGELOG_LINK"
)

DEFAULT_FALLBACK_CONFIG = {
	"template": DEFAULT_RELEASE_TEMPLATE,
	"change-template": GITHUB_STYLE_CHANGE_TEMPLATE,
	"category-template": GITHUB_STYLE_CATEGORY_TEMPLATE,
}

DEFAULT_CONFIG_PATHS = (
	".github/release-drafter.yml",
	".github/release.yml",
	".github/release.yaml",
)

NEW_CONTRIBUTORS_PLACEHOLDER = "$NEW_CONTRIBUTORS"
FULL_CHANGELOG_PLACEHOLDERS = ("${FULL_CHANGELOG_LINK}", "$FULL_CHANGELOG_LINK")

# GitHub App installation tokens; the sponsorsListing GraphQL field rejects them
SERVICE_TOKEN_PREFIXES = ("ghs_",)

PATH_FILTER_CHUNK_SIZE = 20
PATH_FILTER_MAX_ROUNDS = 100
NEW_CONTRIBUTORS_BATCH_SIZE = 10
SPONSOR_MAX_CONCURRENCY = 5
SPONSOR_MAX_ERRORS = 5
TAG_DEREFERENCE_MAX_HOPS = 3
