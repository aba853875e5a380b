"""Execution strategies for concurrent network calls."""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable


class ExecutionStrategy(ABC):
	"""Abstract strategy for running independent tasks."""

	@abstractmethod
	def execute_parallel(
		self,
		tasks: list[Callable[[], Any]],
	) -> list[Any]:
		"""Execute tasks and return their results in task order."""
		pass


class ThreadPoolStrategy(ExecutionStrategy):
	"""Run tasks on a bounded thread pool."""

	def __init__(self, max_workers: int = 5):
		self.max_workers = max_workers

	def execute_parallel(
		self,
		tasks: list[Callable[[], Any]],
	) -> list[Any]:
		if not tasks:
			return []

		with ThreadPoolExecutor(max_workers=min(self.max_workers, len(tasks))) as executor:
			futures = [executor.submit(task) for task in tasks]
			# Propagate exceptions from any task
			return [future.result() for future in futures]


class SequentialStrategy(ExecutionStrategy):
	"""Sequential execution for debugging or deterministic tests."""

	def execute_parallel(
		self,
		tasks: list[Callable[[], Any]],
	) -> list[Any]:
		return [task() for task in tasks]
