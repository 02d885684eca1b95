"""
MODRES - Errors

Build-time errors (CatalogBuildError) mean the template data itself is broken
and the catalog must not be used. Lookup errors (ModLookupError) are raised per
resolve() call and left to the caller to skip, log or surface.
"""

from typing import Sequence


class ModResolutionError(Exception):
    """Base class for everything raised by the mod resolution engine."""


# ─── Catalog build ───────────────────────────────────

class CatalogBuildError(ModResolutionError):
    """The catalog could not be built from the given template data."""

    def __init__(self, template_id, message: str):
        super().__init__(message)
        self.template_id = template_id


class MalformedTemplate(CatalogBuildError):
    def __init__(self, template_id, reason: str = "malformed template"):
        super().__init__(template_id, f"Malformed mod template {template_id!r}: {reason}")
        self.reason = reason


class DuplicateTemplate(CatalogBuildError):
    def __init__(self, template_id):
        super().__init__(template_id, f"Duplicate mod template id {template_id!r}")


class PatternCompileError(CatalogBuildError):
    def __init__(self, template_id, reason: str):
        super().__init__(template_id, f"Cannot compile pattern of mod template {template_id!r}: {reason}")
        self.reason = reason


# ─── Lookup ──────────────────────────────────────────

class ModLookupError(ModResolutionError):
    """A single mod text could not be resolved."""

    def __init__(self, raw_text: str, message: str):
        super().__init__(message)
        self.raw_text = raw_text


class NoMatch(ModLookupError):
    def __init__(self, raw_text: str):
        super().__init__(raw_text, f"No mod template matches {raw_text!r}")


class AmbiguousMatch(ModLookupError):
    """Several templates of the same category match the same text.

    This is a defect in the template data, not something to guess at.
    """

    def __init__(self, raw_text: str, template_ids: Sequence[str]):
        self.template_ids = tuple(template_ids)
        super().__init__(
            raw_text,
            f"Mod text {raw_text!r} matches {len(self.template_ids)} templates: "
            f"{', '.join(self.template_ids)}",
        )


class NumericParseError(ModLookupError):
    def __init__(self, raw_text: str, substring: str):
        super().__init__(raw_text, f"Captured value {substring!r} in {raw_text!r} is not a number")
        self.substring = substring
