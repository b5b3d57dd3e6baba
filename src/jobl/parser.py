"""Parse JOBL text into a validated ``JoblDocument``.

Validation runs two independent passes over the same input: a generic tree
(plain dicts/lists/scalars) for key-set checks, and a typed pydantic decode
for shapes. Every problem from both passes is collected into one result.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Hashable, Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import ValidationError as PydanticValidationError

from jobl.errors import ValidationError, ValidationResult
from jobl.schema import (
    SECTION_ITEM_MODELS,
    TOP_LEVEL_KEYS,
    JoblDocument,
    Person,
    allowed_fields,
)

LOGGER = logging.getLogger(__name__)

DocumentFormat = Literal["toml", "yaml"]

_YAML_SUFFIXES = frozenset({".yml", ".yaml"})
_YAML_MERGE_TAG = "tag:yaml.org,2002:merge"


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that rejects a key repeated within one mapping."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == _YAML_MERGE_TAG:
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


class _TreeLoadError(ValueError):
    """Raised when input text is not well-formed for its format."""


def _load_tree(text: str, fmt: DocumentFormat) -> Any:
    if fmt == "toml":
        try:
            return tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise _TreeLoadError(str(exc)) from exc
    if fmt == "yaml":
        try:
            raw = yaml.load(text, Loader=_UniqueKeyLoader)
        except yaml.YAMLError as exc:
            raise _TreeLoadError(str(exc)) from exc
        return raw if raw is not None else {}
    raise ValueError(f"Unsupported document format: {fmt!r}")


def format_location(loc: tuple[int | str, ...]) -> str:
    """Render a location tuple as ``section[0].field``; empty means ``document``."""

    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "document"


def _top_level_key_errors(tree: Any) -> list[ValidationError]:
    if not isinstance(tree, Mapping):
        return []
    return [
        ValidationError(str(key), f"unknown top-level key '{key}'")
        for key in tree
        if key not in TOP_LEVEL_KEYS
    ]


def _decode(tree: Any) -> tuple[JoblDocument | None, list[ValidationError]]:
    try:
        return JoblDocument.model_validate(tree), []
    except PydanticValidationError as exc:
        errors = [
            ValidationError(format_location(tuple(issue["loc"])), issue["msg"])
            for issue in exc.errors()
        ]
        return None, errors


def _semantic_errors(document: JoblDocument) -> list[ValidationError]:
    errors: list[ValidationError] = []
    if not document.person.name:
        errors.append(ValidationError("person.name", "name cannot be empty"))
    for category, items in (document.skills or {}).items():
        if not items:
            errors.append(ValidationError(f"skills.{category}", "category cannot be empty"))
    return errors


def _unknown_field_errors(
    mapping: Mapping[Any, Any], allowed: frozenset[str], prefix: str
) -> list[ValidationError]:
    return [
        ValidationError(f"{prefix}.{key}", f"unknown field '{key}'")
        for key in mapping
        if key not in allowed
    ]


def _section_field_errors(tree: Any) -> list[ValidationError]:
    if not isinstance(tree, Mapping):
        return []

    errors: list[ValidationError] = []
    person = tree.get("person")
    if isinstance(person, Mapping):
        errors.extend(_unknown_field_errors(person, allowed_fields(Person), "person"))

    for section, model in SECTION_ITEM_MODELS.items():
        items = tree.get(section)
        if not isinstance(items, list):
            continue
        allowed = allowed_fields(model)
        for index, item in enumerate(items):
            # Non-mapping entries already fail the typed decode.
            if isinstance(item, Mapping):
                errors.extend(_unknown_field_errors(item, allowed, f"{section}[{index}]"))
    return errors


def parse_str(text: str, *, fmt: DocumentFormat = "toml") -> ValidationResult:
    """Parse and validate a JOBL document held in memory."""

    LOGGER.debug("parse_start fmt=%s length=%d", fmt, len(text), extra={"fmt": fmt})
    try:
        tree = _load_tree(text, fmt)
    except _TreeLoadError as exc:
        LOGGER.debug("parse_failed stage=tree_load fmt=%s", fmt, extra={"fmt": fmt})
        return ValidationResult.failure([ValidationError("document", str(exc))])

    errors = _top_level_key_errors(tree)
    document, decode_errors = _decode(tree)
    errors.extend(decode_errors)
    if document is not None:
        errors.extend(_semantic_errors(document))
    errors.extend(_section_field_errors(tree))

    # A failed decode always contributes at least one error.
    if document is None or errors:
        LOGGER.debug(
            "parse_complete status=invalid errors=%d",
            len(errors),
            extra={"status": "invalid", "error_count": len(errors)},
        )
        return ValidationResult.failure(errors)
    LOGGER.debug("parse_complete status=valid", extra={"status": "valid", "error_count": 0})
    return ValidationResult.success(document)


def infer_format(path: str | Path) -> DocumentFormat:
    """Pick the document format from a file suffix; TOML unless YAML."""

    return "yaml" if Path(path).suffix.lower() in _YAML_SUFFIXES else "toml"


def parse_file(path: str | Path, *, fmt: DocumentFormat | None = None) -> ValidationResult:
    """Read a JOBL file from disk and validate it."""

    document_path = Path(path)
    try:
        text = document_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.debug(
            "parse_failed stage=read path=%s", document_path, extra={"file": document_path}
        )
        return ValidationResult.failure([ValidationError("file", str(exc))])
    return parse_str(text, fmt=fmt or infer_format(document_path))
