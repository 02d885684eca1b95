"""
MODRES - Mod Template Store

Parses raw stat text templates from the trade API ("+# to maximum Life",
"Adds # to # Physical Damage") into immutable ModTemplate records made of
literal segments and numeric placeholders.

Usage:
    templates = load_templates({
        "explicit": [("explicit.stat_3299347043", "+# to maximum Life")],
    })
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from config import PLACEHOLDER_MARKER
from mod_errors import DuplicateTemplate, MalformedTemplate

logger = logging.getLogger(__name__)


# ─── Data Structures ─────────────────────────────────

class ModCategory(Enum):
    PSEUDO = "pseudo"
    EXPLICIT = "explicit"
    IMPLICIT = "implicit"
    ENCHANT = "enchant"
    CRAFTED = "crafted"

    @classmethod
    def parse(cls, value) -> "ModCategory":
        """Accept a ModCategory or its name in any case ("Explicit", "explicit")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown mod category: {value!r}")


class _Placeholder:
    """Sentinel standing for one numeric value inside a template."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "PLACEHOLDER"

    def __reduce__(self):
        return (_Placeholder, ())


PLACEHOLDER = _Placeholder()

Segment = Union[str, _Placeholder]
Number = Union[int, float]


@dataclass(frozen=True)
class ModTemplate:
    id: str                          # "explicit.stat_3299347043"
    category: ModCategory            # ModCategory.EXPLICIT
    segments: Tuple[Segment, ...]    # ("+", PLACEHOLDER, " to maximum Life")

    @property
    def text(self) -> str:
        """Template text with placeholders shown as the marker."""
        return "".join(
            PLACEHOLDER_MARKER if seg is PLACEHOLDER else seg
            for seg in self.segments
        )

    @property
    def placeholder_count(self) -> int:
        return sum(1 for seg in self.segments if seg is PLACEHOLDER)

    @property
    def leading_literal(self) -> str:
        """Literal text before the first placeholder ("" if it starts with one)."""
        first = self.segments[0]
        return "" if first is PLACEHOLDER else first

    def render(self, values: Sequence[Number]) -> str:
        """Format the template with concrete values, e.g. for "+# to maximum Life"
        and [42] → "+42 to maximum Life".

        Raises ValueError when the number of values differs from placeholder_count.
        """
        expected = self.placeholder_count
        if len(values) != expected:
            raise ValueError(
                f"Invalid number of mod values for {self.text!r}: "
                f"expected {expected}, got {len(values)}"
            )
        it = iter(values)
        return "".join(
            format_value(next(it)) if seg is PLACEHOLDER else seg
            for seg in self.segments
        )

    def __str__(self):
        return self.text


# ─── Helpers ─────────────────────────────────────────

def normalize_whitespace(text: str) -> str:
    """Trim and collapse whitespace runs (incl. newlines) to single spaces."""
    return " ".join(text.split())


def format_value(value: Number) -> str:
    """Render a mod value the way it shows up in mod text (no trailing zeros)."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        # repr is the shortest exact form; Decimal expands exponents (1e-07)
        return format(Decimal(repr(value)), "f").rstrip("0").rstrip(".")
    return str(value)


def parse_pattern(template_id: str, text: str) -> Tuple[Segment, ...]:
    """Split template text into literal segments and placeholders.

    "Adds # to # Fire Damage" → ("Adds ", PLACEHOLDER, " to ", PLACEHOLDER, " Fire Damage")
    """
    if not isinstance(text, str):
        raise MalformedTemplate(template_id, f"pattern must be a string, got {type(text).__name__}")

    parts = normalize_whitespace(text).split(PLACEHOLDER_MARKER)
    segments: List[Segment] = []
    for i, part in enumerate(parts):
        if i > 0:
            segments.append(PLACEHOLDER)
        if part:
            segments.append(part)

    if not segments:
        raise MalformedTemplate(template_id, "empty pattern")
    return tuple(segments)


# ─── Loading ─────────────────────────────────────────

def load_templates(
    raw_definitions: Mapping[Union[str, ModCategory], Iterable[Tuple[str, str]]],
) -> Tuple[ModTemplate, ...]:
    """Build ModTemplates from {category: [(id, text_pattern), ...]}.

    Order is preserved (category order, then list order). Ids must be unique
    across all categories.
    """
    templates: List[ModTemplate] = []
    seen: Dict[str, ModCategory] = {}

    for raw_category, entries in raw_definitions.items():
        entries = list(entries)
        try:
            category = ModCategory.parse(raw_category)
        except ValueError:
            first = entries[0] if entries else None
            bad_id = first[0] if isinstance(first, (tuple, list)) and first else None
            raise MalformedTemplate(bad_id, f"unknown category {raw_category!r}") from None

        for entry in entries:
            try:
                template_id, text = entry
            except (TypeError, ValueError):
                raise MalformedTemplate(None, f"expected (id, text) pair, got {entry!r}") from None

            if not isinstance(template_id, str) or not template_id:
                raise MalformedTemplate(template_id, "template id must be a non-empty string")
            if template_id in seen:
                raise DuplicateTemplate(template_id)

            segments = parse_pattern(template_id, text)
            templates.append(ModTemplate(id=template_id, category=category, segments=segments))
            seen[template_id] = category

    logger.debug(f"Loaded {len(templates)} mod templates "
                 f"from {len(raw_definitions)} categories")
    return tuple(templates)
