"""Field descriptors derived from dataclass and pydantic type annotations.

``describe(cls)`` turns a struct type into a tuple of :class:`FieldSpec`
records (name, lookup key, shape, default literal, validate tag, embedding
flag). The filler works exclusively from these descriptors.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Dict, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from .exceptions import NotAPointerToStructError
from .metadata import collect_metadata, split_annotation
from .rules import Rule, parse_rules

logger = logging.getLogger(__name__)


class ShapeKind(enum.Enum):
    STRING = "str"
    INTEGER = "int"
    BOOLEAN = "bool"
    FLOAT = "float"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    INTERFACE = "interface"
    UNSUPPORTED = "unsupported"


SCALAR_KINDS = frozenset(
    {ShapeKind.STRING, ShapeKind.INTEGER, ShapeKind.BOOLEAN, ShapeKind.FLOAT}
)

_SCALAR_TYPES: Dict[object, ShapeKind] = {
    str: ShapeKind.STRING,
    int: ShapeKind.INTEGER,
    bool: ShapeKind.BOOLEAN,
    float: ShapeKind.FLOAT,
}

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)


@dataclass(frozen=True, slots=True)
class Shape:
    """Declared shape of a field or of a container element."""

    kind: ShapeKind
    annotation: object
    element: Shape | None = None
    key: Shape | None = None
    container: type | None = None

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    def __str__(self) -> str:
        if self.kind is ShapeKind.SEQUENCE and self.element is not None:
            name = getattr(self.container, "__name__", "list")
            if self.container is tuple:
                return f"tuple[{self.element}, ...]"
            return f"{name}[{self.element}]"
        if self.kind is ShapeKind.MAPPING and self.element is not None:
            return f"dict[{self.key}, {self.element}]"
        if isinstance(self.annotation, type):
            return self.annotation.__name__
        return repr(self.annotation)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Descriptor for one settable field of a struct type."""

    name: str
    shape: Shape
    default: str | None = None
    validate: str | None = None
    embedded: bool = False

    @property
    def key(self) -> str:
        """Key looked up in the input mapping."""
        return self.name.lower()

    @property
    def rules(self) -> tuple[Rule, ...]:
        # parsed on use; float fields may carry bounds that are never checked
        return parse_rules(self.validate, field=self.name)


def is_struct_type(tp: object) -> bool:
    """Return True for dataclass and pydantic model classes."""

    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, BaseModel)


def is_mutable_struct(obj: object) -> bool:
    """Return True if ``obj`` is an instance whose fields can be assigned."""

    if isinstance(obj, type):
        return False
    if isinstance(obj, BaseModel):
        return not type(obj).model_config.get("frozen", False)
    if dataclasses.is_dataclass(obj):
        return not type(obj).__dataclass_params__.frozen  # type: ignore[attr-defined]
    return False


def ensure_struct(target: object, *, field: str | None = None) -> None:
    if not is_mutable_struct(target):
        raise NotAPointerToStructError(target, field=field)


def _is_interface_type(tp: object) -> bool:
    if tp is Any or tp is object:
        return True
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    if getattr(tp, "_is_protocol", False):
        return True
    return inspect.isabstract(tp)


def shape_of(annotation: object) -> Shape:
    """Classify an annotation into a :class:`Shape`."""

    base, _ = split_annotation(annotation)

    scalar = _SCALAR_TYPES.get(base)
    if scalar is not None:
        return Shape(kind=scalar, annotation=base)

    if is_struct_type(base):
        return Shape(kind=ShapeKind.STRUCT, annotation=base)

    if base is list:
        return Shape(
            kind=ShapeKind.SEQUENCE,
            annotation=base,
            element=shape_of(Any),
            container=list,
        )
    if base is dict:
        return Shape(
            kind=ShapeKind.MAPPING,
            annotation=base,
            key=shape_of(Any),
            element=shape_of(Any),
        )

    origin = get_origin(base)
    args = get_args(base)

    if origin in _SEQUENCE_ORIGINS:
        element = shape_of(args[0]) if args else shape_of(Any)
        return Shape(
            kind=ShapeKind.SEQUENCE, annotation=base, element=element, container=list
        )

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return Shape(
                kind=ShapeKind.SEQUENCE,
                annotation=base,
                element=shape_of(args[0]),
                container=tuple,
            )
        return Shape(kind=ShapeKind.UNSUPPORTED, annotation=base)

    if origin in _MAPPING_ORIGINS:
        key_arg, value_arg = args if len(args) == 2 else (Any, Any)
        return Shape(
            kind=ShapeKind.MAPPING,
            annotation=base,
            key=shape_of(key_arg),
            element=shape_of(value_arg),
        )

    if _is_interface_type(base):
        return Shape(kind=ShapeKind.INTERFACE, annotation=base)

    return Shape(kind=ShapeKind.UNSUPPORTED, annotation=base)


def _dataclass_fields(cls: type) -> list[FieldSpec]:
    hints = get_type_hints(cls, include_extras=True)
    specs = []
    for field in dataclasses.fields(cls):
        annotation = hints.get(field.name, field.type)
        _, extras = split_annotation(annotation)
        meta = collect_metadata(extras, field.metadata)
        specs.append(
            FieldSpec(
                name=field.name,
                shape=shape_of(annotation),
                default=meta.default,
                validate=meta.validate,
                embedded=meta.embedded,
            )
        )
    return specs


def _model_fields(cls: type[BaseModel]) -> list[FieldSpec]:
    specs = []
    for name, info in cls.model_fields.items():
        meta = collect_metadata(tuple(info.metadata))
        specs.append(
            FieldSpec(
                name=name,
                shape=shape_of(info.annotation),
                default=meta.default,
                validate=meta.validate,
                embedded=meta.embedded,
            )
        )
    return specs


def describe(cls: type) -> tuple[FieldSpec, ...]:
    """Return the settable fields of ``cls`` in declaration order.

    Fields whose name starts with an underscore are not settable and are
    left out.
    """

    if not is_struct_type(cls):
        raise NotAPointerToStructError(cls)
    if issubclass(cls, BaseModel):
        specs = _model_fields(cls)
    else:
        specs = _dataclass_fields(cls)
    logger.debug("described %s: %d fields", cls.__qualname__, len(specs))
    return tuple(spec for spec in specs if not spec.name.startswith("_"))


def zero_for(shape: Shape) -> Any:  # noqa: ANN401
    """Return a fresh zero value for ``shape``."""

    if shape.kind is ShapeKind.STRING:
        return ""
    if shape.kind is ShapeKind.INTEGER:
        return 0
    if shape.kind is ShapeKind.BOOLEAN:
        return False
    if shape.kind is ShapeKind.FLOAT:
        return 0.0
    if shape.kind is ShapeKind.SEQUENCE:
        return (shape.container or list)()
    if shape.kind is ShapeKind.MAPPING:
        return {}
    if shape.kind is ShapeKind.STRUCT:
        return zero_value(shape.annotation)  # type: ignore[arg-type]
    return None


def zero_value(cls: type) -> Any:  # noqa: ANN401
    """Allocate a blank instance of a struct type.

    Fields with a declared Python default keep it; every other field gets
    the zero value of its shape. ``__init__`` validation is bypassed.
    """

    if not is_struct_type(cls):
        raise NotAPointerToStructError(cls)

    if issubclass(cls, BaseModel):
        required = {
            name: zero_for(shape_of(info.annotation))
            for name, info in cls.model_fields.items()
            if info.is_required()
        }
        return cls.model_construct(**required)

    hints = get_type_hints(cls, include_extras=True)
    instance = cls.__new__(cls)
    for field in dataclasses.fields(cls):
        if field.default is not dataclasses.MISSING:
            value = field.default
        elif field.default_factory is not dataclasses.MISSING:
            value = field.default_factory()
        else:
            value = zero_for(shape_of(hints.get(field.name, field.type)))
        object.__setattr__(instance, field.name, value)
    return instance


__all__ = [
    "FieldSpec",
    "SCALAR_KINDS",
    "Shape",
    "ShapeKind",
    "describe",
    "ensure_struct",
    "is_mutable_struct",
    "is_struct_type",
    "shape_of",
    "zero_for",
    "zero_value",
]
