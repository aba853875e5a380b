from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Literal

EventType = Literal["info", "success", "warning"]


@dataclass
class ProgressEvent:
	"""A step of a release-notes run worth showing to the user.

	``metadata`` holds machine-readable details, e.g. ``{"count": 12}`` next to
	"Found 12 merged pull requests".
	"""

	type: EventType
	message: str
	metadata: dict[str, Any] | None = None


class ProgressReporter(ABC):
	@abstractmethod
	def report(self, event: ProgressEvent) -> None:
		"""Report a progress event."""
		pass

	def info(self, message: str, **metadata: Any) -> None:
		self.report(ProgressEvent(type="info", message=message, metadata=metadata or None))

	def warning(self, message: str) -> None:
		self.report(ProgressEvent(type="warning", message=message))

	def success(self, message: str, **metadata: Any) -> None:
		self.report(ProgressEvent(type="success", message=message, metadata=metadata or None))


class NullProgressReporter(ProgressReporter):
	"""Drops every event. Default for library usage."""

	def report(self, event: ProgressEvent) -> None:
		pass


class CollectingProgressReporter(ProgressReporter):
	"""Keep events in memory, e.g. to attach them to a structured result."""

	def __init__(self):
		self.events: list[ProgressEvent] = []

	def report(self, event: ProgressEvent) -> None:
		self.events.append(event)

	def messages(self, event_type: EventType) -> list[str]:
		return [event.message for event in self.events if event.type == event_type]


class CompositeProgressReporter(ProgressReporter):
	"""Fan events out to several reporters."""

	def __init__(self, reporters: list[ProgressReporter]):
		self.reporters = reporters

	def report(self, event: ProgressEvent) -> None:
		for reporter in self.reporters:
			reporter.report(event)
