r"""
MODRES - Bucket Matcher

Compiles the templates of one bucket into a single regular expression that
reports, in one match() call, every template matching the whole input along
with the numeric substrings captured at its placeholders.

Each template becomes an anchored lookahead wrapped in an empty alternative:

    (?:(?=(?P<t0>\+(?P<t0_0>NUM) to maximum Life)\Z)|)
    (?:(?=(?P<t1>Adds (?P<t1_0>NUM) to (?P<t1_1>NUM) Fire Damage)\Z)|)
    ...

The lookaheads consume nothing, so every one of them is tried at position 0
and the overall match always succeeds; a template matched iff its t<i> group
participated, and its captures are the t<i>_<k> groups.

One call, but not one automaton: the engine still tries the lookaheads one
after another, so match cost grows linearly with the bucket size. Keeping
buckets small is what the prefix list is for.
"""

import re
import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

from mod_errors import PatternCompileError
from mod_templates import PLACEHOLDER, ModTemplate

logger = logging.getLogger(__name__)

# Integer or decimal, optionally signed, ASCII digits only: 42, +42, -3, 1.5
NUMBER_PATTERN = r"[+-]?[0-9]+(?:\.[0-9]+)?"


class MatchHit(NamedTuple):
    template_id: str
    captures: Tuple[str, ...]   # numeric substrings, placeholder order


def template_to_regex(template: ModTemplate, group: Optional[str] = None) -> str:
    """
    Translate a template's segments into a regex body (unanchored).

    Literal segments are escaped and matched verbatim; each placeholder becomes
    a capture of NUMBER_PATTERN, named "<group>_<k>" when group is given.

    Example: "+# to maximum Life" → "\\+([+-]?[0-9]+(?:\\.[0-9]+)?) to maximum Life"
    """
    parts = []
    slot = 0
    for seg in template.segments:
        if seg is PLACEHOLDER:
            if group is None:
                parts.append(f"({NUMBER_PATTERN})")
            else:
                parts.append(f"(?P<{group}_{slot}>{NUMBER_PATTERN})")
            slot += 1
        else:
            parts.append(re.escape(seg))
    return "".join(parts)


class BucketMatcher:
    """
    Single-pass matcher over one bucket of templates.

    Usage:
        matcher = compile_matcher(templates)
        hits = matcher.match("Adds 5 to 12 Physical Damage")
        # [MatchHit(template_id="explicit.stat_1940865751", captures=("5", "12"))]
    """

    def __init__(self, templates: Sequence[ModTemplate], regex: Optional[re.Pattern]):
        self._templates = tuple(templates)
        self._regex = regex
        # (template_id, whole-match group, capture groups) per template
        self._groups = tuple(
            (t.id, f"t{i}", tuple(f"t{i}_{k}" for k in range(t.placeholder_count)))
            for i, t in enumerate(self._templates)
        )

    @property
    def templates(self) -> Tuple[ModTemplate, ...]:
        return self._templates

    def __len__(self):
        return len(self._templates)

    def __repr__(self):
        return f"BucketMatcher(<{len(self._templates)} templates>)"

    def match(self, text: str) -> List[MatchHit]:
        """Every template matching the entire text, in bucket order."""
        if self._regex is None:
            return []

        m = self._regex.match(text)
        if m is None:
            return []

        found = m.groupdict()
        hits = []
        for template_id, whole, slots in self._groups:
            if found[whole] is None:
                continue
            hits.append(MatchHit(template_id, tuple(found[s] for s in slots)))
        return hits


def compile_matcher(templates: Sequence[ModTemplate]) -> BucketMatcher:
    """Compile a bucket's templates into one BucketMatcher.

    Raises PatternCompileError naming the offending template; a template set is
    fixed data, so this is a data bug and the catalog must not be built.
    """
    templates = tuple(templates)
    if not templates:
        return BucketMatcher(templates, None)

    alternatives = []
    for i, template in enumerate(templates):
        body = template_to_regex(template, group=f"t{i}")
        try:
            re.compile(body)
        except (re.error, OverflowError, RecursionError) as e:
            raise PatternCompileError(template.id, str(e)) from e
        alternatives.append(f"(?:(?=(?P<t{i}>{body})\\Z)|)")

    try:
        regex = re.compile("".join(alternatives))
    except (re.error, OverflowError, RecursionError) as e:
        # Every template compiled alone, so the combined pattern hit an engine limit
        raise PatternCompileError(
            templates[0].id,
            f"bucket of {len(templates)} templates failed to compile: {e}",
        ) from e

    return BucketMatcher(templates, regex)
