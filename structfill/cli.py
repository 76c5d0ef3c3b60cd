"""CLI command implementations (used by __main__.py)."""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any

from pydantic import BaseModel

from .exceptions import FillError
from .fill import build
from .loader import LoaderError, import_object, load_mapping, load_type_registry
from .shapes import describe, is_struct_type

logger = logging.getLogger(__name__)


def fill_command(target: str, input_path: str, registry_path: str | None = None) -> int:
    """Fill TARGET from INPUT and print the result as JSON.

    Returns:
        0 if successful, 1 if failed
    """
    try:
        cls = _resolve_struct(target)
        mapping = load_mapping(input_path)
        registry = load_type_registry(registry_path) if registry_path else {}
        logger.debug("filling %s from %s", target, input_path)
        instance = build(cls, mapping, registry)
    except (FillError, LoaderError, OSError) as e:
        print(f"✗ Fill failed: {e}")
        return 1

    print(json.dumps(to_plain(instance), indent=2, default=str))
    return 0


def describe_command(target: str) -> int:
    """Print the field descriptors of TARGET."""
    try:
        cls = _resolve_struct(target)
        specs = describe(cls)
    except (FillError, LoaderError) as e:
        print(f"✗ Describe failed: {e}")
        return 1

    print(f"{cls.__module__}.{cls.__qualname__}")
    for spec in specs:
        details = []
        if spec.default is not None:
            details.append(f"default={spec.default!r}")
        if spec.validate is not None:
            details.append(f"validate={spec.validate!r}")
        if spec.embedded:
            details.append("embedded")
        line = f"  {spec.key:<20} {str(spec.shape):<28} {' '.join(details)}"
        print(line.rstrip())
    return 0


def _resolve_struct(target: str) -> type:
    cls = import_object(target)
    if not is_struct_type(cls):
        raise LoaderError(f"{target!r} is not a dataclass or pydantic model")
    return cls


def to_plain(value: Any) -> Any:  # noqa: ANN401
    """Convert filled structs into JSON-compatible builtins."""

    if isinstance(value, BaseModel):
        return {name: to_plain(getattr(value, name)) for name in type(value).model_fields}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: to_plain(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    return value


__all__ = ["describe_command", "fill_command", "to_plain"]
