import logging
import os
import subprocess

from dotenv import dotenv_values

from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def _gh_auth_token() -> str | None:
	"""Ask the GitHub CLI for its token, if it is installed and logged in."""
	try:
		result = subprocess.run(
			["gh", "auth", "token"],
			capture_output=True,
			text=True,
			check=True,
			timeout=10,
		)
	except (OSError, subprocess.SubprocessError) as e:
		logger.debug("gh auth token failed: %s", e)
		return None
	return result.stdout.strip() or None


def resolve_token(token: str | None = None, env_path: str = ".env") -> str:
	"""Find a GitHub token.

	Order: the explicit ``token``, ``GITHUB_TOKEN`` / ``GH_TOKEN`` from the
	environment, the same variables from the ``.env`` file, then ``gh auth token``.

	Raises:
		AuthenticationError: If no token can be found.
	"""
	if token:
		return token

	for name in TOKEN_ENV_VARS:
		if os.environ.get(name):
			logger.debug("Using token from $%s", name)
			return os.environ[name]

	env_file = dotenv_values(env_path)
	for name in TOKEN_ENV_VARS:
		if env_file.get(name):
			logger.debug("Using token %s from %s", name, env_path)
			return env_file[name]

	gh_token = _gh_auth_token()
	if gh_token:
		logger.debug("Using token from gh auth token")
		return gh_token

	raise AuthenticationError("No GitHub token found. Set GITHUB_TOKEN or GH_TOKEN, or run 'gh auth login'.")
