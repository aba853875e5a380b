"""CLI adapter for progress reporting."""

from ..core.interfaces import ProgressEvent, ProgressReporter
from ..ui import CLI


class CLIProgressReporter(ProgressReporter):
	"""Adapt ProgressReporter interface to the CLI class.

	Warnings are always shown; other events only when verbose.
	"""

	def __init__(self, cli: CLI, verbose: bool = False):
		self.cli = cli
		self.verbose = verbose

	def report(self, event: ProgressEvent) -> None:
		"""Route progress events to appropriate CLI methods."""
		if event.type == "warning":
			self.cli.show_warning(event.message)
		elif not self.verbose:
			return
		elif event.type == "success":
			self.cli.show_success(event.message)
		else:
			self.cli.show_markdown_text(event.message)
