"""Shared fixtures for MODRES test suite."""

import sys
import logging
from pathlib import Path

import pytest

# Ensure src/ is importable
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from mod_catalog import build_catalog
from mod_prefixes import parse_prefix_rules
from mod_resolver import ModResolver

logger = logging.getLogger(__name__)


# ── Sample template data ─────────────────────────────────
# Shaped like the trade API stats: {category: [(id, text), ...]}

SAMPLE_DEFINITIONS = {
    "pseudo": [
        ("pseudo.pseudo_total_life", "+# total maximum Life"),
        ("pseudo.pseudo_total_fire_resistance", "+#% total to Fire Resistance"),
        ("pseudo.pseudo_increased_movement_speed", "#% increased Movement Speed"),
    ],
    "explicit": [
        ("explicit.stat_3299347043", "+# to maximum Life"),
        ("explicit.stat_1940865751", "Adds # to # Physical Damage"),
        ("explicit.stat_709508406", "Adds # to # Fire Damage"),
        ("explicit.stat_3372524247", "+#% to Fire Resistance"),
        ("explicit.stat_2250533757", "#% increased Movement Speed"),
        ("explicit.stat_681332047", "#% increased Attack Speed"),
        ("explicit.stat_2482852589", "#% increased maximum Energy Shield"),
        ("explicit.stat_1754445556", "Minions have #% increased Movement Speed"),
        ("explicit.stat_3067892458", "Socketed Gems are Supported by Level # Fire Penetration"),
        ("explicit.stat_4080418644", "Regenerate # Life per second"),
        ("explicit.stat_1050105434", "Cannot be Frozen"),
    ],
    "implicit": [
        ("implicit.stat_3325883026", "Regenerate #% of Life per second"),
        ("implicit.stat_2923486259", "+#% to Chaos Resistance"),
    ],
    "enchant": [
        ("enchant.stat_2954116742", "Allocates #"),
    ],
    "crafted": [
        ("crafted.stat_3299347043", "+# to maximum Mana"),
        ("crafted.stat_2250533757", "#% increased Movement Speed"),
    ],
}

SAMPLE_PREFIXES = [
    "// test prefixes",
    "Adds",
    "Socketed Gems are Supported by Level",
    "Socketed",
    "Minions have",
    "Minions",
    "Regenerate",
    "Cannot be",
    "Allocates",
    "",
    "+",
]


# ── Fixtures ─────────────────────────────────────────────

@pytest.fixture
def sample_definitions():
    return {cat: list(entries) for cat, entries in SAMPLE_DEFINITIONS.items()}


@pytest.fixture(scope="session")
def prefix_rules():
    return parse_prefix_rules(SAMPLE_PREFIXES)


@pytest.fixture(scope="session")
def catalog(prefix_rules):
    """Catalog built once per session from the sample templates."""
    return build_catalog(SAMPLE_DEFINITIONS, prefix_rules)


@pytest.fixture(scope="session")
def resolver(catalog):
    return ModResolver(catalog)


# ── Helper factories ─────────────────────────────────────

def make_catalog(definitions, prefixes=("Adds", "+")):
    """Shorthand to build a small catalog from definitions and prefix literals."""
    return build_catalog(definitions, parse_prefix_rules(prefixes))
