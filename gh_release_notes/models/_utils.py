from datetime import datetime, timezone


def parse_timestamp(value: str) -> datetime:
	"""Parse an ISO 8601 timestamp, treating naive values as UTC.

	Examples:
	'2024-01-01T00:00:00Z' -> datetime(2024, 1, 1, tzinfo=timezone.utc)
	'2024-01-01' -> datetime(2024, 1, 1, tzinfo=timezone.utc)
	"""
	parsed = datetime.fromisoformat(value)
	if parsed.tzinfo is None:
		parsed = parsed.replace(tzinfo=timezone.utc)
	return parsed
