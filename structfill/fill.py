"""Recursive filling of dataclass / pydantic instances from plain mappings.

``fill(target, mapping, registry)`` walks the fields of ``target`` in
declaration order. Each field is looked up under its lower-cased name;
present values are converted into the field's declared shape, absent ones
fall back to the field's ``Default`` literal. Nested structs recurse with
their sub-mapping, embedded structs with the parent's own mapping, and
sequences of protocol/abstract elements are instantiated through
``registry`` using the ``"type"`` discriminator of each element.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, TypeVar

from .coerce import coerce_scalar, to_int
from .exceptions import (
    ConversionError,
    InvalidNestedInputError,
    UnknownTypeIdentifierError,
    UnsupportedFieldKindError,
)
from .rules import validate
from .shapes import FieldSpec, Shape, ShapeKind, describe, ensure_struct, zero_value

logger = logging.getLogger(__name__)

DISCRIMINATOR_KEY = "type"

TypeRegistry = Mapping[str, Callable[[], Any]]

T = TypeVar("T")


def fill(
    target: object,
    mapping: Mapping[str, Any],
    registry: TypeRegistry | None = None,
) -> None:
    """Populate ``target`` in place from ``mapping``.

    Args:
        target: a mutable dataclass or pydantic model instance
        mapping: input values keyed by lower-cased field name
        registry: discriminator -> zero-argument factory, used for
            sequences of protocol/abstract elements

    Raises:
        FillError: on the first field that cannot be filled. Fields filled
            before the failing one keep their new values.
    """

    _fill_struct(target, mapping, registry or {}, path="")


def build(
    cls: type[T],
    mapping: Mapping[str, Any],
    registry: TypeRegistry | None = None,
) -> T:
    """Allocate a blank ``cls`` instance and fill it from ``mapping``."""

    instance = zero_value(cls)
    fill(instance, mapping, registry)
    return instance


def apply_default(target: object, spec: FieldSpec, *, path: str | None = None) -> None:
    """Apply the declared default of ``spec`` to ``target``.

    A default that does not parse for the field's kind is ignored. Struct
    fields without a default receive their own fields' defaults.
    """

    path = path or spec.name
    if spec.default is not None:
        if not spec.shape.is_scalar:
            return
        try:
            value = coerce_scalar(spec.shape.kind, spec.default, field=path)
        except ConversionError as exc:
            logger.debug("ignoring default for %s: %s", path, exc)
            return
        setattr(target, spec.name, value)
        return

    if spec.shape.kind is ShapeKind.STRUCT:
        nested = _nested_instance(target, spec)
        ensure_struct(nested, field=path)
        for nested_spec in describe(type(nested)):
            apply_default(nested, nested_spec, path=_join(path, nested_spec.name))


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _fill_struct(
    target: object, mapping: Mapping[str, Any], registry: TypeRegistry, path: str
) -> None:
    ensure_struct(target, field=path or None)
    if not isinstance(mapping, Mapping):
        raise InvalidNestedInputError(
            field=path or None, expected="a mapping", value=mapping
        )

    for spec in describe(type(target)):
        field_path = _join(path, spec.name)
        if spec.embedded and spec.shape.kind is ShapeKind.STRUCT:
            _fill_struct(_nested_instance(target, spec), mapping, registry, field_path)
        elif spec.key in mapping:
            _fill_field(target, spec, mapping[spec.key], registry, field_path)
        else:
            apply_default(target, spec, path=field_path)


def _nested_instance(target: object, spec: FieldSpec) -> Any:  # noqa: ANN401
    """Return the struct held by ``spec``'s field, allocating one if needed."""

    cls = spec.shape.annotation
    current = getattr(target, spec.name, None)
    if isinstance(current, cls):  # type: ignore[arg-type]
        return current
    instance = zero_value(cls)  # type: ignore[arg-type]
    setattr(target, spec.name, instance)
    return instance


def _fill_field(
    target: object,
    spec: FieldSpec,
    value: Any,  # noqa: ANN401
    registry: TypeRegistry,
    path: str,
) -> None:
    kind = spec.shape.kind

    if kind is ShapeKind.STRUCT:
        if value is None:
            _fill_struct(_nested_instance(target, spec), {}, registry, path)
            return
        if not isinstance(value, Mapping):
            raise InvalidNestedInputError(
                field=path, expected="a mapping for nested struct", value=value
            )
        _fill_struct(_nested_instance(target, spec), value, registry, path)
        return

    if kind is ShapeKind.INTEGER:
        converted = to_int(value, field=path)
        validate(spec.rules, converted, field=path)
        setattr(target, spec.name, converted)
        return

    setattr(target, spec.name, _materialize(spec.shape, value, registry, path))


def _materialize(
    shape: Shape,
    value: Any,  # noqa: ANN401
    registry: TypeRegistry,
    path: str,
) -> Any:  # noqa: ANN401
    if shape.is_scalar:
        return coerce_scalar(shape.kind, value, field=path)

    if shape.kind is ShapeKind.STRUCT:
        if not isinstance(value, Mapping):
            raise InvalidNestedInputError(
                field=path, expected="a mapping for nested struct", value=value
            )
        instance = zero_value(shape.annotation)  # type: ignore[arg-type]
        _fill_struct(instance, value, registry, path)
        return instance

    if shape.kind is ShapeKind.SEQUENCE:
        if not isinstance(value, (list, tuple)):
            raise InvalidNestedInputError(field=path, expected="a sequence", value=value)
        assert shape.element is not None
        if shape.element.kind is ShapeKind.INTERFACE:
            items = _materialize_polymorphic(shape.element, value, registry, path)
        else:
            items = [
                _materialize(shape.element, item, registry, f"{path}[{index}]")
                for index, item in enumerate(value)
            ]
        return tuple(items) if shape.container is tuple else items

    if shape.kind is ShapeKind.MAPPING:
        if not isinstance(value, Mapping):
            raise InvalidNestedInputError(field=path, expected="a mapping", value=value)
        return _convert(shape, value, path)

    raise UnsupportedFieldKindError(shape.annotation, field=path)


def _materialize_polymorphic(
    element: Shape,
    items: list[Any] | tuple[Any, ...],
    registry: TypeRegistry,
    path: str,
) -> list[Any]:
    result = []
    for index, item in enumerate(items):
        item_path = f"{path}[{index}]"
        if not isinstance(item, Mapping):
            raise InvalidNestedInputError(
                field=item_path, expected="a mapping for interface element", value=item
            )

        identifier = item.get(DISCRIMINATOR_KEY)
        if not isinstance(identifier, str):
            logger.warning(
                "warning: type identifier missing for interface element %s, skipping",
                item_path,
            )
            continue

        factory = registry.get(identifier)
        if factory is None:
            raise UnknownTypeIdentifierError(
                identifier, field=item_path, available_keys=tuple(registry)
            )

        instance = factory()
        _fill_struct(instance, item, registry, item_path)
        if not _satisfies(element.annotation, instance):
            raise ConversionError(value=instance, target=str(element), field=item_path)
        result.append(instance)
    return result


def _satisfies(interface: object, instance: object) -> bool:
    if interface is Any or interface is object or not isinstance(interface, type):
        return True
    if getattr(interface, "_is_protocol", False) and not getattr(
        interface, "_is_runtime_protocol", False
    ):
        return True
    return isinstance(instance, interface)


def _convert(shape: Shape, value: Any, path: str) -> Any:  # noqa: ANN401
    """Direct conversion used for mapping keys and values (no struct filling)."""

    if shape.is_scalar:
        return coerce_scalar(shape.kind, value, field=path)

    if shape.kind is ShapeKind.STRUCT:
        if isinstance(value, shape.annotation):  # type: ignore[arg-type]
            return value
        raise ConversionError(value=value, target=str(shape), field=path)

    if shape.kind is ShapeKind.SEQUENCE:
        if not isinstance(value, (list, tuple)):
            raise ConversionError(value=value, target=str(shape), field=path)
        assert shape.element is not None
        items = [
            _convert(shape.element, item, f"{path}[{index}]")
            for index, item in enumerate(value)
        ]
        return tuple(items) if shape.container is tuple else items

    if shape.kind is ShapeKind.MAPPING:
        if not isinstance(value, Mapping):
            raise ConversionError(value=value, target=str(shape), field=path)
        assert shape.key is not None and shape.element is not None
        return {
            _convert(shape.key, key, path): _convert(
                shape.element, item, f"{path}[{key!r}]"
            )
            for key, item in value.items()
        }

    if shape.kind is ShapeKind.INTERFACE:
        if _satisfies(shape.annotation, value):
            return value
        raise ConversionError(value=value, target=str(shape), field=path)

    raise UnsupportedFieldKindError(shape.annotation, field=path)


__all__ = ["DISCRIMINATOR_KEY", "TypeRegistry", "apply_default", "build", "fill"]
