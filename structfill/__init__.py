"""structfill: populate dataclasses and pydantic models from plain mappings."""

from .exceptions import (
    ConversionError,
    FillError,
    InvalidNestedInputError,
    InvalidRuleError,
    NotAPointerToStructError,
    UnknownTypeIdentifierError,
    UnsupportedFieldKindError,
    UnsupportedRuleError,
    ValidationBoundError,
)
from .fill import DISCRIMINATOR_KEY, TypeRegistry, apply_default, build, fill
from .loader import LoaderError, import_object, load_mapping, load_type_registry
from .metadata import Default, Embedded, Validate
from .rules import Rule, parse_rules, validate
from .shapes import FieldSpec, Shape, ShapeKind, describe, shape_of, zero_value

__all__ = [
    "ConversionError",
    "DISCRIMINATOR_KEY",
    "Default",
    "Embedded",
    "FieldSpec",
    "FillError",
    "InvalidNestedInputError",
    "InvalidRuleError",
    "LoaderError",
    "NotAPointerToStructError",
    "Rule",
    "Shape",
    "ShapeKind",
    "TypeRegistry",
    "UnknownTypeIdentifierError",
    "UnsupportedFieldKindError",
    "UnsupportedRuleError",
    "Validate",
    "ValidationBoundError",
    "apply_default",
    "build",
    "describe",
    "fill",
    "import_object",
    "load_mapping",
    "load_type_registry",
    "parse_rules",
    "shape_of",
    "validate",
    "zero_value",
]
