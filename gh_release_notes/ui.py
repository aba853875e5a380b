import typer
from rich.console import Console
from rich.markdown import Markdown


class CLI:
	def __init__(self):
		# stdout is reserved for the release notes themselves
		self.console = Console(stderr=True)

	def show_markdown_text(self, text: str) -> None:
		self.console.print(Markdown(text))

	def show_output(self, text: str) -> None:
		"""Write the raw result to stdout, unformatted so it can be piped."""
		typer.echo(text)

	def show_error(self, message: str) -> None:
		"""Show a red error message, to stderr.

		Args:
			message (str): The error message to show.
		"""
		typer.secho(message, err=True, fg=typer.colors.RED)

	def show_warning(self, message: str) -> None:
		typer.secho(f"Warning: {message}", err=True, fg=typer.colors.YELLOW)

	def show_success(self, message: str) -> None:
		"""Show a green success message, to stderr.

		Args:
			message (str): The success message to show.
		"""
		typer.secho(message, err=True, fg=typer.colors.GREEN)
