"""Errors raised while filling a target structure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

NOT_A_STRUCT_MESSAGE = "provided type must be a pointer to a struct"


@dataclass(slots=True, eq=False)
class FillError(ValueError):
    """Base error for a failed fill pass.

    ``field`` is the dotted path of the field being filled when the error
    occurred (``None`` for errors about the target itself).
    """

    message: str
    field: str | None = None
    available_keys: Sequence[str] | None = None

    def __post_init__(self) -> None:
        self.args = (self.__str__(),)

    def __str__(self) -> str:
        base = self.message
        if self.field:
            base = f"{self.field}: {base}"
        if self.available_keys:
            joined = ", ".join(sorted(set(self.available_keys)))
            base = f"{base} (available: {joined})"
        return base


class NotAPointerToStructError(FillError):
    """The target is not a mutable dataclass or pydantic model instance."""

    def __init__(self, target: object, *, field: str | None = None) -> None:
        if isinstance(target, type):
            got = f"class {target.__qualname__}"
        else:
            got = type(target).__qualname__
        super().__init__(message=f"{NOT_A_STRUCT_MESSAGE} (got {got})", field=field)


class InvalidNestedInputError(FillError):
    """A nested field received an input value of the wrong container kind."""

    def __init__(self, *, field: str | None, expected: str, value: object) -> None:
        super().__init__(
            message=f"invalid type {type(value).__name__}, expected {expected}",
            field=field,
        )


class ConversionError(FillError):
    """An input value could not be converted to the declared scalar kind."""

    def __init__(self, *, value: object, target: str, field: str | None = None) -> None:
        super().__init__(message=f"cannot convert {value!r} to {target}", field=field)


class ValidationBoundError(FillError):
    """An integer value lies outside a declared ``min``/``max`` bound."""

    def __init__(
        self, *, value: int, rule: str, bound: int, field: str | None = None
    ) -> None:
        relation = "less than" if rule == "min" else "greater than"
        super().__init__(
            message=f"value {value} is {relation} {rule} {bound}", field=field
        )
        self.value = value
        self.rule = rule
        self.bound = bound


class UnsupportedRuleError(FillError):
    """A validation rule name other than ``min`` or ``max`` was declared."""

    def __init__(self, rule: str, *, field: str | None = None) -> None:
        super().__init__(
            message=f"unsupported validation rule: {rule}",
            field=field,
            available_keys=("max", "min"),
        )
        self.rule = rule


class InvalidRuleError(FillError):
    """A ``validate`` annotation entry is not of the form ``rule=integer``."""


class UnsupportedFieldKindError(FillError):
    """The field's declared type is not one the filler knows how to build."""

    def __init__(self, annotation: object, *, field: str | None = None) -> None:
        super().__init__(message=f"unsupported type: {annotation!r}", field=field)


class UnknownTypeIdentifierError(FillError):
    """A polymorphic element names a discriminator absent from the registry."""

    def __init__(
        self,
        identifier: str,
        *,
        field: str | None,
        available_keys: Sequence[str],
    ) -> None:
        super().__init__(
            message=f"type identifier {identifier} not found in type registry",
            field=field,
            available_keys=tuple(available_keys),
        )
        self.identifier = identifier


__all__ = [
    "NOT_A_STRUCT_MESSAGE",
    "ConversionError",
    "FillError",
    "InvalidNestedInputError",
    "InvalidRuleError",
    "NotAPointerToStructError",
    "UnknownTypeIdentifierError",
    "UnsupportedFieldKindError",
    "UnsupportedRuleError",
    "ValidationBoundError",
]
