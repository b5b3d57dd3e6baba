"""Typed JOBL document models.

The declared fields of each model are also the allow-lists used to detect
unknown keys, see ``allowed_fields``. Collections are stored as tuples and
``skills`` as a read-only mapping so a validated document cannot change.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_serializer, field_validator
from pydantic_core import PydanticCustomError

# Unknown keys are ignored here and reported by the structural checks in
# ``jobl.parser`` with a path for each key.
_MODEL_CONFIG = ConfigDict(extra="ignore", frozen=True)


def _require_list(value: Any) -> Any:
    # Sets, strings and mappings would otherwise be coerced to tuples.
    if isinstance(value, list | tuple):
        return value
    raise PydanticCustomError("list_type", "Input should be a valid list")


StrList = Annotated[tuple[str, ...], BeforeValidator(_require_list)]


class Person(BaseModel):
    """Personal information; only ``name`` is required."""

    model_config = _MODEL_CONFIG

    name: str
    headline: str | None = None
    location: str | None = None
    email: str | None = None
    website: str | None = None
    github: str | None = None
    linkedin: str | None = None
    phone: str | None = None
    summary: str | None = None


class ExperienceItem(BaseModel):
    """A job or position."""

    model_config = _MODEL_CONFIG

    title: str
    company: str
    location: str | None = None
    start: str | None = None
    end: str | None = None
    summary: str | None = None
    technologies: StrList = ()
    highlights: StrList = ()


class ProjectItem(BaseModel):
    """A personal or professional project."""

    model_config = _MODEL_CONFIG

    name: str
    url: str | None = None
    summary: str | None = None
    role: str | None = None
    start: str | None = None
    end: str | None = None
    technologies: StrList = ()


class EducationItem(BaseModel):
    """A degree or certification."""

    model_config = _MODEL_CONFIG

    institution: str
    degree: str
    location: str | None = None
    start: str | None = None
    end: str | None = None
    details: StrList = ()


ExperienceList = Annotated[tuple[ExperienceItem, ...], BeforeValidator(_require_list)]
ProjectList = Annotated[tuple[ProjectItem, ...], BeforeValidator(_require_list)]
EducationList = Annotated[tuple[EducationItem, ...], BeforeValidator(_require_list)]


class JoblDocument(BaseModel):
    """Top-level JOBL document."""

    model_config = _MODEL_CONFIG

    person: Person
    skills: Mapping[str, StrList] | None = None
    experience: ExperienceList = ()
    projects: ProjectList = ()
    education: EducationList = ()

    @field_validator("skills", mode="after")
    @classmethod
    def _freeze_skills(
        cls, value: Mapping[str, tuple[str, ...]] | None
    ) -> Mapping[str, tuple[str, ...]] | None:
        if value is None:
            return None
        return MappingProxyType(dict(value))

    @field_serializer("skills")
    def _dump_skills(
        self, value: Mapping[str, tuple[str, ...]] | None
    ) -> dict[str, list[str]] | None:
        if value is None:
            return None
        return {category: list(items) for category, items in value.items()}


def allowed_fields(model: type[BaseModel]) -> frozenset[str]:
    """Return the keys a source mapping may use for ``model``."""

    return frozenset(model.model_fields)


TOP_LEVEL_KEYS = allowed_fields(JoblDocument)

SECTION_ITEM_MODELS: dict[str, type[BaseModel]] = {
    "experience": ExperienceItem,
    "projects": ProjectItem,
    "education": EducationItem,
}
