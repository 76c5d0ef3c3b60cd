"""Input documents and type registries loaded from JSON/YAML files."""

from __future__ import annotations

import importlib
import json
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

import yaml

from .shapes import is_struct_type, zero_value

_YAML_SUFFIXES = (".yaml", ".yml")


class LoaderError(ValueError):
    """Raised when an input document or type registry cannot be loaded."""


def load_mapping(path: str | Path) -> dict[str, Any]:
    """Read a JSON or YAML document whose top level is a mapping."""

    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in _YAML_SUFFIXES:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise LoaderError(f"{path}: invalid YAML: {exc}") from exc
        else:
            try:
                raw = json.load(f)
            except json.JSONDecodeError as exc:
                raise LoaderError(f"{path}: invalid JSON: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise LoaderError(
            f"{path}: top level must be a mapping, got {type(raw).__name__}"
        )
    return raw


def import_object(fqn: str) -> Any:  # noqa: ANN401
    """Resolve ``"package.module.Name"`` or ``"package.module:Name"``."""

    if not isinstance(fqn, str) or not fqn:
        raise LoaderError(f"object reference must be a non-empty string, got {fqn!r}")

    if ":" in fqn:
        module_name, _, attr = fqn.partition(":")
    else:
        module_name, _, attr = fqn.rpartition(".")
    if not module_name or not attr:
        raise LoaderError(f"invalid object reference {fqn!r}")

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise LoaderError(f"module {module_name!r} not found for {fqn!r}") from exc

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise LoaderError(f"{fqn!r} does not exist") from exc
    return obj


def load_type_registry(
    source: str | Path | Mapping[str, Any],
) -> Dict[str, Callable[[], Any]]:
    """Build a discriminator -> factory registry.

    ``source`` is a mapping (or a JSON/YAML file holding one) of
    ``discriminator: "module.Class"`` entries, optionally nested under a
    top-level ``types`` key. Struct classes are registered as factories of
    blank instances (see :func:`structfill.shapes.zero_value`)::

        types:
          Dog: myapp.pets.Dog
          Cat: myapp.pets:Cat
    """

    raw = source if isinstance(source, Mapping) else load_mapping(source)
    entries = raw.get("types", raw)
    if not isinstance(entries, Mapping):
        raise LoaderError("type registry 'types' entry must be a mapping")

    registry: Dict[str, Callable[[], Any]] = {}
    for identifier, fqn in entries.items():
        factory = import_object(fqn)
        if not callable(factory):
            raise LoaderError(f"{fqn!r} registered as {identifier!r} is not callable")
        if is_struct_type(factory):
            factory = partial(zero_value, factory)
        registry[str(identifier)] = factory
    return registry


__all__ = ["LoaderError", "import_object", "load_mapping", "load_type_registry"]
