"""Render user templates against the structured release result."""

import logging
from pathlib import Path
from typing import Any, Protocol

from jinja2 import DictLoader, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from .content_loader import ContentLoader, LocalContentLoader
from .exceptions import TemplateRenderError

logger = logging.getLogger(__name__)

MAIN_TEMPLATE_NAME = "main_template"
INCLUDE_FILES = ("header.md", "header.md.jinja", "body.md", "body.md.jinja", "footer.md", "footer.md.jinja")


class TemplateEngine(Protocol):
	def add_template(self, name: str, source: str) -> None: ...

	def render(self, name: str, data: dict[str, Any]) -> str: ...


class JinjaTemplateEngine:
	"""Jinja2 in a sandbox, so that templates from remote sources cannot reach Python internals."""

	def __init__(self):
		self.templates: dict[str, str] = {}
		self.env = SandboxedEnvironment(
			loader=DictLoader(self.templates),
			keep_trailing_newline=True,
		)

	def add_template(self, name: str, source: str) -> None:
		self.templates[name] = source

	def render(self, name: str, data: dict[str, Any]) -> str:
		try:
			return self.env.get_template(name).render(**data)
		except TemplateError as e:
			raise TemplateRenderError(f"Failed to render template {name}: {e}") from e


def include_template_paths(tag: str | None, prev_tag: str | None) -> list[str]:
	"""Candidate include files for a release, relative to the working directory.

	Examples:
	('v2.0.0', 'v1.0.0') -> ['.changelog/v2.0.0/header.md', ..., '.changelog/from-v1.0.0/footer.md.jinja']
	"""
	directories = []
	if tag:
		directories.append(f".changelog/{tag}")
	if prev_tag:
		directories.append(f".changelog/from-{prev_tag}")
	return [f"{directory}/{filename}" for directory in directories for filename in INCLUDE_FILES]


class TemplateRenderer:
	def __init__(
		self,
		loader: ContentLoader,
		engine: TemplateEngine | None = None,
		base_dir: Path | None = None,
	):
		self.loader = loader
		self.engine = engine or JinjaTemplateEngine()
		self.base_dir = base_dir or Path.cwd()

	def load_and_render(self, source: str, data: dict[str, Any]) -> str:
		"""Load ``source`` through the content loader and render it with ``data``.

		Existing ``.changelog/<tag>/...`` and ``.changelog/from-<prev_tag>/...``
		files are registered first so the template can ``include`` them.
		"""
		logger.debug("Loading template from %s", source)
		template = self.loader.load(source)
		self.preload_includes(
			tag=(data.get("release") or {}).get("tag") or data.get("tag"),
			prev_tag=(data.get("lastRelease") or {}).get("tag_name"),
		)
		self.engine.add_template(MAIN_TEMPLATE_NAME, template)
		return self.engine.render(MAIN_TEMPLATE_NAME, data)

	def preload_includes(self, tag: str | None, prev_tag: str | None) -> list[str]:
		loaded = []
		for relative_path in include_template_paths(tag, prev_tag):
			path = self.base_dir / relative_path
			if not path.is_file():
				continue
			self.engine.add_template(relative_path, path.read_text(encoding="utf-8"))
			logger.debug("Loaded include template %s", relative_path)
			loaded.append(relative_path)
		return loaded
