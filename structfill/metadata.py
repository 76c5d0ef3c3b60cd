"""Field annotations consumed by :func:`structfill.fill`.

Metadata can be attached with ``typing.Annotated``::

    age: Annotated[int, Default("30"), Validate("min=18,max=65")] = 0
    base: Annotated[Pet, Embedded] = field(default_factory=Pet)

or, for dataclasses, through ``dataclasses.field(metadata=...)`` using the
``"default"``, ``"validate"`` and ``"embedded"`` keys.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Annotated, Any, Mapping, get_args, get_origin

DEFAULT_KEY = "default"
VALIDATE_KEY = "validate"
EMBEDDED_KEY = "embedded"


@dataclass(frozen=True, slots=True)
class Default:
    """Textual default applied when the input mapping lacks the field."""

    literal: str

    def __post_init__(self) -> None:
        if not isinstance(self.literal, str):
            raise TypeError(
                f"Default literal must be a string, got {type(self.literal).__name__}"
            )

    @classmethod
    def __class_getitem__(cls, item: str) -> "Default":
        """Support the subscript form: Default["30"] -> Default(literal="30")"""
        return cls(literal=item)


@dataclass(frozen=True, slots=True)
class Validate:
    """Comma separated ``rule=bound`` list, e.g. ``"min=18,max=65"``."""

    rules: str

    def __post_init__(self) -> None:
        if not isinstance(self.rules, str):
            raise TypeError(
                f"Validate rules must be a string, got {type(self.rules).__name__}"
            )

    @classmethod
    def __class_getitem__(cls, item: str) -> "Validate":
        return cls(rules=item)


class Embedded:
    """Marks a struct field whose fields are read from the parent's mapping."""

    def __repr__(self) -> str:
        return "Embedded"


@dataclass(frozen=True, slots=True)
class FieldMetadata:
    default: str | None = None
    validate: str | None = None
    embedded: bool = False


def split_annotation(annotation: object) -> tuple[object, tuple[object, ...]]:
    """Return ``(base, extras)`` for an annotation, unwrapping ``Annotated``."""

    if annotation in (None, inspect._empty):
        return Any, ()
    if get_origin(annotation) is Annotated:
        args = get_args(annotation)
        return args[0], tuple(args[1:])
    return annotation, ()


def collect_metadata(
    extras: tuple[object, ...], mapping: Mapping[str, Any] | None = None
) -> FieldMetadata:
    """Merge ``Annotated`` markers with a dataclass field's metadata mapping.

    Markers win over mapping entries when both are given.
    """

    mapping = mapping or {}
    default = mapping.get(DEFAULT_KEY)
    validate = mapping.get(VALIDATE_KEY)
    embedded = bool(mapping.get(EMBEDDED_KEY, False))

    for meta in extras:
        if isinstance(meta, Default):
            default = meta.literal
        elif isinstance(meta, Validate):
            validate = meta.rules
        elif meta is Embedded or isinstance(meta, Embedded):
            embedded = True

    # an empty tag is the same as no tag
    return FieldMetadata(
        default=str(default) if default not in (None, "") else None,
        validate=str(validate) if validate not in (None, "") else None,
        embedded=embedded,
    )


__all__ = [
    "DEFAULT_KEY",
    "Default",
    "EMBEDDED_KEY",
    "Embedded",
    "FieldMetadata",
    "VALIDATE_KEY",
    "Validate",
    "collect_metadata",
    "split_annotation",
]
