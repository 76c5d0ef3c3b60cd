"""``min``/``max`` bound rules attached to integer fields."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .exceptions import InvalidRuleError, UnsupportedRuleError, ValidationBoundError

_INTEGER = re.compile(r"[+-]?\d+")


@dataclass(frozen=True, slots=True)
class Rule:
    """A single ``name=bound`` validation entry."""

    name: str
    bound: int

    def __str__(self) -> str:
        return f"{self.name}={self.bound}"


def parse_rules(text: str | None, *, field: str | None = None) -> tuple[Rule, ...]:
    """Parse ``"min=18,max=65"`` into an ordered tuple of rules.

    Rule names are not checked here; :func:`validate` rejects unknown names
    when the rule is evaluated.
    """

    if not text:
        return ()

    rules: list[Rule] = []
    for entry in text.split(","):
        name, sep, raw_bound = (part.strip() for part in entry.partition("="))
        if not sep:
            raise InvalidRuleError(
                message=f"invalid validate tag format: {entry!r}", field=field
            )
        if not _INTEGER.fullmatch(raw_bound):
            raise InvalidRuleError(
                message=f"invalid rule value: {raw_bound!r} is not an integer",
                field=field,
            )
        rules.append(Rule(name=name, bound=int(raw_bound)))
    return tuple(rules)


def validate(rules: Iterable[Rule], value: int, *, field: str | None = None) -> None:
    """Check ``value`` against each rule in order; raise on the first failure."""

    for rule in rules:
        if rule.name == "min":
            if value < rule.bound:
                raise ValidationBoundError(
                    value=value, rule="min", bound=rule.bound, field=field
                )
        elif rule.name == "max":
            if value > rule.bound:
                raise ValidationBoundError(
                    value=value, rule="max", bound=rule.bound, field=field
                )
        else:
            raise UnsupportedRuleError(rule.name, field=field)


__all__ = ["Rule", "parse_rules", "validate"]
