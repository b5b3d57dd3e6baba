"""Parse and validate JOBL profile documents."""

from jobl.errors import (
    DocumentValidationError,
    ValidationError,
    ValidationResult,
    format_errors,
)
from jobl.parser import parse_file, parse_str
from jobl.schema import EducationItem, ExperienceItem, JoblDocument, Person, ProjectItem
from jobl.serialize import dump_document, to_canonical_dict

__version__ = "0.1.0"

__all__ = [
    "DocumentValidationError",
    "EducationItem",
    "ExperienceItem",
    "JoblDocument",
    "Person",
    "ProjectItem",
    "ValidationError",
    "ValidationResult",
    "__version__",
    "dump_document",
    "format_errors",
    "parse_file",
    "parse_str",
    "to_canonical_dict",
]
