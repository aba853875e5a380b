#!/usr/bin/env python
"""gh-release-notes CLI."""

import json
import logging
from pathlib import Path

import requests
import typer

from .adapters.cli_progress import CLIProgressReporter
from .core.config import SPONSOR_FETCH_MODES, GeneratorOptions
from .core.config_loader import load_settings
from .exceptions import ReleaseNotesError
from .generator import ReleaseNotesGenerator
from .init_command import DEFAULT_OUTPUT, run_init
from .repo_detector import resolve_repo
from .ui import CLI

app = typer.Typer(
	help="Generate release notes from merged GitHub pull requests",
	invoke_without_command=True,
	no_args_is_help=True,
)


@app.callback()
def callback():
	"""Generate release notes from merged GitHub pull requests."""
	pass


def configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)


@app.command()
def generate(
	repo: str | None = typer.Option(None, "--repo", "-R", help="Repository as owner/repo (default: detected)"),
	config: str | None = typer.Option(
		None, "--config", "-c", help="Release config: path, https:// URL or pkg:github/owner/repo@ref#path"
	),
	prev_tag: str | None = typer.Option(None, "--prev-tag", help="Previous release tag (default: detected)"),
	tag: str | None = typer.Option(None, "--tag", help="Tag of the release being prepared"),
	target: str | None = typer.Option(None, "--target", "--ref", help="Target branch or commitish"),
	output_json: bool = typer.Option(False, "--json", help="Print the structured result as JSON"),
	preview: bool = typer.Option(False, "--preview", help="Link the full changelog to the target instead of the tag"),
	template: str | None = typer.Option(None, "--template", help="Jinja2 template to render the result with"),
	sponsor_fetch_mode: str = typer.Option("auto", "--sponsor-fetch-mode", help="none, graphql, html or auto"),
	skip_new_contributors: bool = typer.Option(
		False, "--skip-new-contributors", help="Do not detect first-time contributors"
	),
	settings: Path | None = typer.Option(
		None, "--settings", help="Settings file (default: ~/.gh-release-notes/config.toml if present)"
	),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress and debug logs"),
):
	"""Generate release notes for a GitHub repository.

	Prints the release body, or the structured result with --json.
	"""
	configure_logging(verbose)
	cli = CLI()

	if sponsor_fetch_mode not in SPONSOR_FETCH_MODES:
		cli.show_error(f"Invalid --sponsor-fetch-mode: {sponsor_fetch_mode}")
		raise typer.Exit(code=1)

	try:
		resolved_repo = resolve_repo(repo)
		release_notes_config = load_settings(settings)
		if config:
			release_notes_config.config_source = config
		release_notes_config.options = GeneratorOptions(
			prev_tag=prev_tag,
			tag=tag,
			target=target,
			preview=preview,
			sponsor_fetch_mode=sponsor_fetch_mode,
			include_new_contributors=False
			if skip_new_contributors
			else release_notes_config.options.include_new_contributors,
			extended_output=output_json or template is not None,
		)

		generator = ReleaseNotesGenerator(release_notes_config, CLIProgressReporter(cli, verbose=verbose))
		result = generator.generate(resolved_repo.owner, resolved_repo.name)

		if template:
			cli.show_output(generator.render_template(result, template))
		elif output_json:
			cli.show_output(json.dumps(result.to_dict(), indent=2))
		else:
			cli.show_output(result.release.body)
	except (ReleaseNotesError, requests.RequestException, FileNotFoundError) as e:
		cli.show_error(str(e))
		raise typer.Exit(code=1)


@app.command()
def init(
	output: str = typer.Option(DEFAULT_OUTPUT, "--output", "-o", help="Where to write the config ('-' for stdout)"),
	force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
	"""Write a starter release config."""
	try:
		run_init(output, force)
	except FileExistsError as e:
		CLI().show_error(str(e))
		raise typer.Exit(code=1)


if __name__ == "__main__":
	app()
