"""Canonical serialization of validated documents."""

from __future__ import annotations

from typing import Any

import yaml

from jobl.schema import SECTION_ITEM_MODELS, JoblDocument


def _drop_empty_lists(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value != []}


def to_canonical_dict(document: JoblDocument) -> dict[str, Any]:
    """Return plain data without absent optional fields or empty lists.

    Field order follows the schema declaration order.
    """

    data = document.model_dump(mode="json", exclude_none=True)
    for section in SECTION_ITEM_MODELS:
        data[section] = [_drop_empty_lists(item) for item in data[section]]
    return _drop_empty_lists(data)


def dump_document(document: JoblDocument) -> str:
    """Serialize ``document`` as canonical YAML accepted by ``parse_str(fmt="yaml")``."""

    return yaml.safe_dump(
        to_canonical_dict(document),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
