"""
MODRES - Mod Catalog

The immutable, explicitly passed handle holding every known mod template,
the prefix rules and one compiled matcher per bucket. Built once at startup
and shared read-only by every resolver call (no locking needed).

Usage:
    catalog = build_catalog(load_definitions(StatsSource()))
    resolver = ModResolver(catalog)
"""

import time
import logging
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from mod_matcher import BucketMatcher, compile_matcher
from mod_prefixes import FALLBACK_KEY, PrefixRule, bucket_templates, load_prefix_rules, select_rule
from mod_templates import ModCategory, ModTemplate, load_templates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bucket:
    key: Optional[str]                  # prefix literal, None = fallback
    templates: Tuple[ModTemplate, ...]
    matcher: BucketMatcher

    @property
    def is_fallback(self) -> bool:
        return self.key is FALLBACK_KEY

    def __len__(self):
        return len(self.templates)


class Catalog:
    """
    All known mod templates, bucketed by prefix and compiled for matching.

    Never mutated after construction; use build_catalog() to create one.
    """

    def __init__(self, templates: Sequence[ModTemplate], prefix_rules: Sequence[PrefixRule],
                 buckets: Iterable[Bucket]):
        self._templates = tuple(templates)
        self._prefix_rules = tuple(prefix_rules)
        self._by_id = MappingProxyType({t.id: t for t in self._templates})
        self._buckets = MappingProxyType({b.key: b for b in buckets})
        if FALLBACK_KEY not in self._buckets:
            raise ValueError("Catalog requires a fallback bucket")

    # ─── Templates ─────────────────────────────────────

    @property
    def templates(self) -> Tuple[ModTemplate, ...]:
        return self._templates

    def get(self, template_id: str) -> Optional[ModTemplate]:
        return self._by_id.get(template_id)

    def by_category(self, category) -> Tuple[ModTemplate, ...]:
        category = ModCategory.parse(category)
        return tuple(t for t in self._templates if t.category is category)

    def __len__(self):
        return len(self._templates)

    def __iter__(self) -> Iterator[ModTemplate]:
        return iter(self._templates)

    def __contains__(self, template_id) -> bool:
        return template_id in self._by_id

    def __repr__(self):
        return f"Catalog(<{len(self._templates)} templates in {len(self._buckets)} buckets>)"

    # ─── Buckets ───────────────────────────────────────

    @property
    def prefix_rules(self) -> Tuple[PrefixRule, ...]:
        return self._prefix_rules

    @property
    def buckets(self) -> Mapping[Optional[str], Bucket]:
        return self._buckets

    @property
    def fallback(self) -> Bucket:
        return self._buckets[FALLBACK_KEY]

    def bucket_for(self, text: str) -> Bucket:
        """Bucket a (normalized) mod text is matched against first."""
        rule = select_rule(text, self._prefix_rules)
        if rule is None:
            return self.fallback
        return self._buckets[rule.literal]

    def stats(self) -> dict:
        """Template counts per category and per non-empty bucket."""
        per_category = Counter(t.category.value for t in self._templates)
        per_bucket = {
            ("<fallback>" if key is FALLBACK_KEY else key): len(bucket)
            for key, bucket in self._buckets.items()
            if len(bucket)
        }
        return {
            "templates": len(self._templates),
            "categories": dict(per_category),
            "buckets": per_bucket,
            "empty_buckets": sum(1 for b in self._buckets.values() if not len(b)),
        }


def build_catalog(raw_definitions: Mapping, prefix_rules: Optional[Sequence[PrefixRule]] = None) -> Catalog:
    """Load, bucket and compile every template.

    Any MalformedTemplate / DuplicateTemplate / PatternCompileError propagates;
    a half-built catalog is never returned.
    """
    start = time.time()
    if prefix_rules is None:
        prefix_rules = load_prefix_rules()
    prefix_rules = tuple(prefix_rules)

    templates = load_templates(raw_definitions)
    split = bucket_templates(templates, prefix_rules)

    buckets = []
    for key, members in split.items():
        matcher = compile_matcher(members)
        buckets.append(Bucket(key=key, templates=tuple(members), matcher=matcher))
        if members:
            label = "<fallback>" if key is FALLBACK_KEY else repr(key)
            logger.debug(f"Bucket {label}: {len(members)} templates")

    catalog = Catalog(templates, prefix_rules, buckets)
    elapsed = time.time() - start
    logger.info(f"Mod catalog: {len(templates)} templates, "
                f"{len(buckets)} buckets ({len(catalog.fallback)} in fallback), "
                f"built in {elapsed:.2f}s")
    return catalog
