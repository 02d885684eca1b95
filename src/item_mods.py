"""
MODRES - Item Mods
Attaches resolved mods to item records from the stash/trade APIs.

An item record carries its mod lines grouped by how they were applied:
    {"implicitMods": [...], "explicitMods": [...], "craftedMods": [...], "enchantMods": [...]}

Each line is resolved against templates of its own category only. Lookup
failures are logged here and kept on the ItemMod; the resolver never logs.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from mod_errors import ModLookupError, NoMatch
from mod_resolver import ModResolver, ResolvedMod
from mod_templates import ModCategory, Number

logger = logging.getLogger(__name__)

# Item record field → category of the mods it lists (in display order)
ITEM_MOD_FIELDS: Tuple[Tuple[str, ModCategory], ...] = (
    ("enchantMods", ModCategory.ENCHANT),
    ("implicitMods", ModCategory.IMPLICIT),
    ("explicitMods", ModCategory.EXPLICIT),
    ("craftedMods", ModCategory.CRAFTED),
)


@dataclass
class ItemMod:
    category: ModCategory                     # list the line came from
    text: str                                 # "+42 to maximum Life"
    resolved: Optional[ResolvedMod] = None
    error: Optional[ModLookupError] = None

    @property
    def values(self) -> Optional[Tuple[Number, ...]]:
        """Mod values if the text was resolved.

        Note that not every number in a mod text is a value: in "Has 1 Abyssal
        Socket" the 1 is part of the template.
        """
        return self.resolved.values if self.resolved else None

    @property
    def template_id(self) -> Optional[str]:
        return self.resolved.template_id if self.resolved else None


def resolve_item_mods(resolver: ModResolver, item: dict) -> List[ItemMod]:
    """Resolve every mod line of an item record."""
    results = []
    for field_name, category in ITEM_MOD_FIELDS:
        for text in item.get(field_name) or ():
            results.append(_resolve_line(resolver, category, text))

    if results:
        matched = sum(1 for m in results if m.resolved)
        logger.debug(f"Matched {matched}/{len(results)} mods "
                     f"on {item.get('name') or item.get('typeLine') or 'item'}")
    return results


def _resolve_line(resolver: ModResolver, category: ModCategory, text: str) -> ItemMod:
    mod = ItemMod(category=category, text=text)
    try:
        mod.resolved = resolver.resolve(text, categories=(category,))
    except NoMatch as e:
        logger.debug(f"No {category.value} template for mod text {text!r}")
        mod.error = e
    except ModLookupError as e:
        logger.warning(f"Could not resolve {category.value} mod: {e}")
        mod.error = e
    return mod
