"""
Category → color classification.

Rules are an ordered table, evaluated top to bottom; the first rule whose
pattern occurs in the category wins. Order matters because one category can
match several patterns (e.g. "human disease").
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class VisualClass:
    """Color bucket a record is drawn with."""

    name: str
    color: str


@dataclass(frozen=True)
class ClassRule:
    """Map a category pattern (regular expression, searched) to a visual class."""

    pattern: str
    visual_class: VisualClass
    ignore_case: bool = True
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        flags = re.IGNORECASE if self.ignore_case else 0
        try:
            compiled = re.compile(self.pattern, flags)
        except re.error as exc:
            raise ValueError(f"Invalid class pattern '{self.pattern}': {exc}") from exc
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, category: str) -> bool:
        return self._compiled.search(category) is not None


DEFAULT_CLASS = VisualClass("other", "#f39c12")

DEFAULT_RULES: tuple[ClassRule, ...] = (
    ClassRule("人|human", VisualClass("human", "#e74c3c")),
    ClassRule("动|animal", VisualClass("animal", "#27ae60")),
    ClassRule("植|plant", VisualClass("plant", "#2980b9")),
    ClassRule("病|pathogen|disease", VisualClass("pathogen", "#8e44ad")),
)


class Classifier:
    """First-match-wins lookup over an ordered rule table."""

    def __init__(
        self,
        rules: Sequence[ClassRule] = DEFAULT_RULES,
        default: VisualClass = DEFAULT_CLASS,
    ):
        self.rules = tuple(rules)
        self.default = default

    def classify(self, category: Optional[str]) -> VisualClass:
        if not category:
            return self.default
        for rule in self.rules:
            if rule.matches(category):
                return rule.visual_class
        return self.default

    def legend(self) -> list[VisualClass]:
        """Distinct classes in rule order, default last."""
        seen: list[VisualClass] = []
        for visual_class in [rule.visual_class for rule in self.rules] + [self.default]:
            if visual_class not in seen:
                seen.append(visual_class)
        return seen


def default_classifier() -> Classifier:
    return Classifier(DEFAULT_RULES, DEFAULT_CLASS)


def classifier_from_config(
    rules_cfg: Optional[Sequence[dict[str, Any]]],
    default_cfg: Optional[dict[str, Any]] = None,
) -> Classifier:
    """Build a classifier from config entries like {pattern, name, color}.

    An empty or missing rule list falls back to the built-in table.
    """
    default = DEFAULT_CLASS
    if default_cfg:
        default = VisualClass(
            name=str(default_cfg.get("name", DEFAULT_CLASS.name)),
            color=str(default_cfg.get("color", DEFAULT_CLASS.color)),
        )
    if not rules_cfg:
        return Classifier(DEFAULT_RULES, default)

    rules: list[ClassRule] = []
    for idx, entry in enumerate(rules_cfg):
        if not isinstance(entry, dict):
            raise ValueError(f"Class rule #{idx} must be a mapping, got {entry!r}.")
        missing = [key for key in ("pattern", "name", "color") if not entry.get(key)]
        if missing:
            raise ValueError(f"Class rule #{idx} is missing {', '.join(missing)}.")
        rules.append(
            ClassRule(
                pattern=str(entry["pattern"]),
                visual_class=VisualClass(str(entry["name"]), str(entry["color"])),
                ignore_case=bool(entry.get("ignore_case", True)),
            )
        )
    return Classifier(rules, default)
