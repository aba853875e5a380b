"""Write a starter release config."""

from dataclasses import dataclass
from pathlib import Path

import yaml
from rich.console import Console

from .constants import DEFAULT_CONFIG_PATHS, DEFAULT_FALLBACK_CONFIG

console = Console()

DEFAULT_OUTPUT = DEFAULT_CONFIG_PATHS[0]

HEADER = """# Release Drafter configuration initialized by gh-release-notes
# This config is compatible with Release Drafter and intended for use with gh-release-notes.
# Release Drafter: https://github.com/release-drafter/release-drafter
# Add categories to group PRs, e.g.:
# categories:
#   - title: Features
#     labels: [feature, enhancement]
"""

FOOTER = """# exclude-labels: ["skip-changelog"]
# include-labels: ["release-notes"]
# exclude-contributors: ["dependabot[bot]"]
"""


@dataclass
class InitResult:
	status: str  # "printed", "created", "overwrote" or "up-to-date"
	content: str
	path: Path | None = None


def generate_init_config_yaml() -> str:
	"""Return the default config as commented YAML."""
	body = yaml.safe_dump(DEFAULT_FALLBACK_CONFIG, sort_keys=False, allow_unicode=True, width=float("inf"))
	return HEADER + body + FOOTER


def init_config(output: str = DEFAULT_OUTPUT, force: bool = False) -> InitResult:
	"""Write the default config to ``output`` (``-`` for stdout only).

	Raises:
		FileExistsError: If a different file exists and ``force`` is not set.
	"""
	content = generate_init_config_yaml()
	if output == "-":
		return InitResult(status="printed", content=content)

	path = Path(output).resolve()
	path.parent.mkdir(parents=True, exist_ok=True)

	if not path.exists():
		path.write_text(content, encoding="utf-8")
		return InitResult(status="created", content=content, path=path)

	if path.read_text(encoding="utf-8") == content:
		return InitResult(status="up-to-date", content=content, path=path)
	if not force:
		raise FileExistsError(f"Refusing to overwrite existing file without --force: {path}")

	path.write_text(content, encoding="utf-8")
	return InitResult(status="overwrote", content=content, path=path)


def run_init(output: str = DEFAULT_OUTPUT, force: bool = False) -> InitResult:
	"""CLI front end of ``init_config``."""
	result = init_config(output, force)
	if result.status == "printed":
		console.out(result.content, end="")
	elif result.status == "up-to-date":
		console.print(f"[dim]{result.path} is up to date[/dim]")
	else:
		console.print(f"[green]✓[/green] {result.status.capitalize()} {result.path}")
	return result
