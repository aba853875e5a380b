from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..exceptions import ConfigurationError


class _ConfigModel(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Category(_ConfigModel):
	"""A release-notes section. Empty ``labels`` means "catch remaining PRs"."""

	title: str
	labels: list[str] = Field(default_factory=list)
	collapse_after: int | None = Field(default=None, alias="collapse-after", ge=0)

	@model_validator(mode="before")
	@classmethod
	def _merge_single_label(cls, data: Any) -> Any:
		if isinstance(data, dict) and data.get("label"):
			data = dict(data)
			labels = list(data.get("labels") or [])
			data["labels"] = [data.pop("label"), *labels]
		return data

	@property
	def is_wildcard(self) -> bool:
		return not self.labels


class VersionResolver(_ConfigModel):
	major: list[str] = Field(default_factory=list)
	minor: list[str] = Field(default_factory=list)
	patch: list[str] = Field(default_factory=list)
	default: Literal["major", "minor", "patch"] = "patch"

	@model_validator(mode="before")
	@classmethod
	def _flatten_label_sections(cls, data: Any) -> Any:
		# release-drafter style: `major: {labels: [...]}`
		if isinstance(data, dict):
			data = {
				key: value["labels"] if isinstance(value, dict) and "labels" in value else value
				for key, value in data.items()
			}
		return data


class ReleaseConfig(_ConfigModel):
	"""Tool-native release configuration."""

	template: str
	change_template: str = Field(default="* $TITLE (#$NUMBER) @$AUTHOR", alias="change-template")
	change_title_escapes: str = Field(default="", alias="change-title-escapes")
	category_template: str = Field(default="## $TITLE", alias="category-template")
	no_changes_template: str = Field(default="* No changes", alias="no-changes-template")
	no_contributors_template: str = Field(default="No contributors", alias="no-contributors-template")
	categories: list[Category] = Field(default_factory=list)
	exclude_labels: list[str] = Field(default_factory=list, alias="exclude-labels")
	include_labels: list[str] = Field(default_factory=list, alias="include-labels")
	exclude_contributors: list[str] = Field(default_factory=list, alias="exclude-contributors")
	include_paths: list[str] = Field(default_factory=list, alias="include-paths")
	sort_by: Literal["merged_at", "title"] = Field(default="merged_at", alias="sort-by")
	sort_direction: Literal["ascending", "descending"] = Field(default="descending", alias="sort-direction")
	tag_prefix: str = Field(default="", alias="tag-prefix")
	include_pre_releases: bool = Field(default=False, alias="include-pre-releases")
	filter_by_commitish: bool = Field(default=False, alias="filter-by-commitish")
	name_template: str = Field(default="", alias="name-template")
	tag_template: str = Field(default="", alias="tag-template")
	version_template: str = Field(default="$MAJOR.$MINOR.$PATCH", alias="version-template")
	version_resolver: VersionResolver = Field(default_factory=VersionResolver, alias="version-resolver")

	@field_validator("categories")
	@classmethod
	def _single_wildcard_category(cls, categories: list[Category]) -> list[Category]:
		wildcards = [category.title for category in categories if category.is_wildcard]
		if len(wildcards) > 1:
			raise ValueError(f"only one category may have no labels, got: {', '.join(wildcards)}")
		return categories

	@property
	def category_labels(self) -> set[str]:
		return {label for category in self.categories for label in category.labels}

	@classmethod
	def from_dict(cls, data: Any) -> "ReleaseConfig":
		"""Validate an already-parsed config object.

		Raises:
			ConfigurationError: If the object does not match the schema.
		"""
		if not isinstance(data, dict):
			raise ConfigurationError(f"Config must be a mapping, got {type(data).__name__}")
		try:
			return cls.model_validate(data)
		except ValidationError as e:
			raise ConfigurationError(f"Invalid release config: {e}") from e


class PlatformExclude(_ConfigModel):
	labels: list[str] = Field(default_factory=list)
	authors: list[str] = Field(default_factory=list)


class PlatformCategory(_ConfigModel):
	title: str
	labels: list[str] = Field(default_factory=list)
	exclude: PlatformExclude | None = None

	@property
	def is_wildcard(self) -> bool:
		return self.labels == ["*"]


class PlatformChangelog(_ConfigModel):
	exclude: PlatformExclude | None = None
	categories: list[PlatformCategory] = Field(default_factory=list)


class PlatformNativeConfig(_ConfigModel):
	"""GitHub's ``.github/release.yml`` format."""

	changelog: PlatformChangelog
