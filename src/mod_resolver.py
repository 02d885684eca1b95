"""
MODRES - Mod Resolver
Resolves mod text lines ("+42 to maximum Life") to the template that produced
them and the numbers they carry.

Usage:
    resolver = ModResolver(catalog)
    mod = resolver.resolve("Adds 5 to 12 Physical Damage")
    mod.template_id, mod.values   # "explicit.stat_1940865751", (5, 12)

resolve() is pure: it never logs, retries or touches the catalog, and can be
called from any number of threads at once.
"""

from dataclasses import dataclass
from typing import Collection, Dict, List, Optional, Sequence, Tuple

from config import CATEGORY_PRIORITY
from mod_catalog import Catalog
from mod_errors import AmbiguousMatch, NoMatch, NumericParseError
from mod_matcher import MatchHit
from mod_templates import ModCategory, ModTemplate, Number, normalize_whitespace


@dataclass(frozen=True)
class ResolvedMod:
    template_id: str             # "explicit.stat_3299347043"
    category: ModCategory        # ModCategory.EXPLICIT
    values: Tuple[Number, ...]   # (42,)
    raw_text: str                # "+42 to maximum Life"

    @property
    def value(self) -> Optional[Number]:
        """First value, or None for mods without numbers."""
        return self.values[0] if self.values else None


def parse_number(raw_text: str, token: str) -> Number:
    """Parse a captured token: "42" → 42, "+1.5" → 1.5, "-3" → -3."""
    try:
        if "." in token:
            return float(token)
        return int(token)
    except ValueError:
        raise NumericParseError(raw_text, token) from None


class ModResolver:
    """
    Matches raw mod text against a Catalog.

    category_priority orders categories from most to least specific; when
    templates of several categories match the same text the most specific one
    wins. Categories missing from it rank below all listed ones.
    """

    def __init__(self, catalog: Catalog, category_priority: Sequence = CATEGORY_PRIORITY):
        self._catalog = catalog
        self._rank: Dict[ModCategory, int] = {}
        for i, category in enumerate(category_priority):
            self._rank.setdefault(ModCategory.parse(category), i)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def resolve(self, raw_text: str, categories: Optional[Collection] = None) -> ResolvedMod:
        """
        Resolve a single mod line.

        Args:
            raw_text: mod text exactly as found on the item
            categories: if given, only templates of these categories are eligible

        Raises:
            NoMatch: no eligible template matches the text
            AmbiguousMatch: several templates of the winning category match
            NumericParseError: a captured value is not a number
        """
        allowed = None
        if categories is not None:
            allowed = frozenset(ModCategory.parse(c) for c in categories)

        text = normalize_whitespace(raw_text)

        primary = self._catalog.bucket_for(text)
        hits = self._eligible(primary.matcher.match(text), allowed)
        if not hits and not primary.is_fallback:
            hits = self._eligible(self._catalog.fallback.matcher.match(text), allowed)

        if not hits:
            raise NoMatch(raw_text)

        template, captures = self._pick(raw_text, hits)
        values = tuple(parse_number(raw_text, token) for token in captures)
        return ResolvedMod(
            template_id=template.id,
            category=template.category,
            values=values,
            raw_text=raw_text,
        )

    def try_resolve(self, raw_text: str, categories: Optional[Collection] = None) -> Optional[ResolvedMod]:
        """Like resolve(), but returns None when nothing matches.

        AmbiguousMatch and NumericParseError still propagate.
        """
        try:
            return self.resolve(raw_text, categories)
        except NoMatch:
            return None

    # ─── Internals ──────────────────────────────────────

    def _eligible(self, hits: List[MatchHit], allowed) -> List[Tuple[ModTemplate, Tuple[str, ...]]]:
        found = []
        for hit in hits:
            template = self._catalog.get(hit.template_id)
            if allowed is not None and template.category not in allowed:
                continue
            found.append((template, hit.captures))
        return found

    def _pick(self, raw_text: str, hits):
        if len(hits) == 1:
            return hits[0]

        lowest = max(self._rank.values(), default=-1) + 1
        best_rank = min(self._rank.get(t.category, lowest) for t, _ in hits)
        best = [(t, caps) for t, caps in hits if self._rank.get(t.category, lowest) == best_rank]
        if len(best) > 1:
            raise AmbiguousMatch(raw_text, [t.id for t, _ in best])
        return best[0]
