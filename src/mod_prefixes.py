"""
MODRES - Prefix Bucketer

Shards the template catalog into buckets keyed by a curated list of literal
mod text prefixes ("Adds", "Socketed Gems have", "+", ...), so a mod line is
only matched against templates sharing its prefix instead of all of them.

The prefix list is order-sensitive: rules are tried in file order and the
first one that is a prefix of the text wins. A rule that is itself a prefix of
a later rule would shadow it, so longer literals have to come first:

    Minions have
    Minions deal
    Minions

find_order_violations() reports entries breaking this.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import MOD_TEXT_PREFIXES_FILE
from mod_templates import ModTemplate

logger = logging.getLogger(__name__)

# Key of the bucket for templates/texts no rule applies to
FALLBACK_KEY = None

_COMMENT = "//"


@dataclass(frozen=True)
class PrefixRule:
    literal: str   # "Adds"
    rank: int      # position in the curated list, 0 = tried first


def parse_prefix_rules(lines: Iterable[str]) -> Tuple[PrefixRule, ...]:
    """Build PrefixRules from raw lines, skipping blanks and // comments."""
    literals = []
    for line in lines:
        literal = line.strip()
        if not literal or literal.startswith(_COMMENT):
            continue
        literals.append(literal)

    rules = tuple(PrefixRule(literal=lit, rank=i) for i, lit in enumerate(literals))

    for earlier, later in find_order_violations(rules):
        logger.warning(f"Mod prefix {later.literal!r} (#{later.rank}) starts with "
                       f"{earlier.literal!r} which comes earlier in the list")
    return rules


def load_prefix_rules(path: Path = MOD_TEXT_PREFIXES_FILE) -> Tuple[PrefixRule, ...]:
    """Load the curated prefix list from disk."""
    with open(path, "r", encoding="utf-8") as f:
        rules = parse_prefix_rules(f)
    logger.debug(f"Loaded {len(rules)} mod text prefixes from {path}")
    return rules


def find_order_violations(rules: Sequence[PrefixRule]) -> List[Tuple[PrefixRule, PrefixRule]]:
    """Return (earlier, later) pairs where the later literal starts with the earlier one."""
    violations = []
    for i, earlier in enumerate(rules):
        for later in rules[i + 1:]:
            if later.literal.startswith(earlier.literal):
                violations.append((earlier, later))
    return violations


def select_rule(text: str, rules: Sequence[PrefixRule]) -> Optional[PrefixRule]:
    """First rule (in rank order) whose literal is a prefix of text, or None."""
    for rule in rules:
        if text.startswith(rule.literal):
            return rule
    return None


def bucket_templates(
    templates: Iterable[ModTemplate],
    rules: Sequence[PrefixRule],
) -> Dict[Optional[str], List[ModTemplate]]:
    """Assign every template to exactly one bucket.

    Returns an ordered dict with one key per rule (in rank order, possibly
    empty) followed by FALLBACK_KEY.
    """
    buckets: Dict[Optional[str], List[ModTemplate]] = {rule.literal: [] for rule in rules}
    buckets[FALLBACK_KEY] = []

    for template in templates:
        lead = template.leading_literal
        rule = select_rule(lead, rules)
        if rule is not None and _is_shadowed(template, rule, rules):
            # A mod line of this template can begin with a longer, earlier rule
            # (the text after the leading literal is a number), so lookup would
            # pick that rule's bucket. The fallback bucket is always tried next.
            logger.debug(f"Mod template {template.id!r} ({template.text!r}) is shadowed "
                         f"by a longer prefix, moving it to the fallback bucket")
            rule = None

        key = rule.literal if rule is not None else FALLBACK_KEY
        buckets[key].append(template)

    return buckets


def _is_shadowed(template: ModTemplate, rule: PrefixRule, rules: Sequence[PrefixRule]) -> bool:
    if len(template.segments) == 1:
        return False
    lead = template.leading_literal
    return any(
        len(other.literal) > len(lead) and other.literal.startswith(lead)
        for other in rules
        if other.rank < rule.rank
    )
