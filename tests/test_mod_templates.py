"""Tests for mod_templates.py — pattern parsing, template loading, rendering."""

import pytest

from mod_errors import DuplicateTemplate, MalformedTemplate
from mod_templates import (
    PLACEHOLDER, ModCategory, ModTemplate, format_value, load_templates, parse_pattern,
)


# ── parse_pattern ────────────────────────────────────────

PATTERN_CASES = [
    ("+# to maximum Life",          ("+", PLACEHOLDER, " to maximum Life")),
    ("Adds # to # Physical Damage", ("Adds ", PLACEHOLDER, " to ", PLACEHOLDER, " Physical Damage")),
    ("#% increased Attack Speed",   (PLACEHOLDER, "% increased Attack Speed")),
    ("Allocates #",                 ("Allocates ", PLACEHOLDER)),
    ("Cannot be Frozen",            ("Cannot be Frozen",)),
    ("#",                           (PLACEHOLDER,)),
]


@pytest.mark.parametrize("text,expected", PATTERN_CASES)
def test_parse_pattern(text, expected):
    assert parse_pattern("t", text) == expected


def test_parse_pattern_normalizes_whitespace():
    """Surrounding whitespace is trimmed and inner runs (incl. newlines) collapse."""
    segments = parse_pattern("t", "  Adds #  to #\nFire Damage ")
    assert segments == ("Adds ", PLACEHOLDER, " to ", PLACEHOLDER, " Fire Damage")


def test_parse_pattern_literals_never_contain_marker():
    segments = parse_pattern("t", "# to # to #")
    for seg in segments:
        if seg is not PLACEHOLDER:
            assert "#" not in seg
            assert seg


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_parse_pattern_empty(text):
    with pytest.raises(MalformedTemplate) as exc:
        parse_pattern("explicit.stat_1", text)
    assert exc.value.template_id == "explicit.stat_1"


def test_parse_pattern_not_a_string():
    with pytest.raises(MalformedTemplate):
        parse_pattern("explicit.stat_1", None)


# ── ModCategory ──────────────────────────────────────────

@pytest.mark.parametrize("raw,expected", [
    ("explicit", ModCategory.EXPLICIT),
    ("Explicit", ModCategory.EXPLICIT),
    ("PSEUDO", ModCategory.PSEUDO),
    (" crafted ", ModCategory.CRAFTED),
    (ModCategory.ENCHANT, ModCategory.ENCHANT),
])
def test_category_parse(raw, expected):
    assert ModCategory.parse(raw) is expected


@pytest.mark.parametrize("raw", ["fractured", "", None, 3])
def test_category_parse_unknown(raw):
    with pytest.raises(ValueError):
        ModCategory.parse(raw)


# ── load_templates ───────────────────────────────────────

def test_load_templates(sample_definitions):
    templates = load_templates(sample_definitions)
    total = sum(len(v) for v in sample_definitions.values())
    assert len(templates) == total
    assert all(isinstance(t, ModTemplate) for t in templates)

    life = next(t for t in templates if t.id == "explicit.stat_3299347043")
    assert life.category is ModCategory.EXPLICIT
    assert life.text == "+# to maximum Life"
    assert life.placeholder_count == 1
    assert life.leading_literal == "+"


def test_load_templates_preserves_order():
    templates = load_templates({
        "implicit": [("implicit.b", "b #"), ("implicit.a", "a #")],
        "explicit": [("explicit.c", "c #")],
    })
    assert [t.id for t in templates] == ["implicit.b", "implicit.a", "explicit.c"]


def test_load_templates_accepts_enum_keys():
    templates = load_templates({ModCategory.CRAFTED: [("crafted.x", "+# to Strength")]})
    assert templates[0].category is ModCategory.CRAFTED


def test_load_templates_unknown_category():
    with pytest.raises(MalformedTemplate) as exc:
        load_templates({"veiled": [("veiled.stat_1", "Veiled # mod")]})
    assert exc.value.template_id == "veiled.stat_1"


@pytest.mark.parametrize("entries", [[5], [None], [""], []])
def test_load_templates_unknown_category_bad_entries(entries):
    with pytest.raises(MalformedTemplate) as exc:
        load_templates({"fractured": entries})
    assert exc.value.template_id is None


def test_load_templates_empty_pattern():
    with pytest.raises(MalformedTemplate) as exc:
        load_templates({"explicit": [("explicit.ok", "+# to Strength"), ("explicit.bad", "")]})
    assert exc.value.template_id == "explicit.bad"


@pytest.mark.parametrize("entry", [("", "+# to Strength"), (None, "+# to Strength"), ("only-id",)])
def test_load_templates_bad_entry(entry):
    with pytest.raises(MalformedTemplate):
        load_templates({"explicit": [entry]})


def test_duplicate_id_within_category():
    with pytest.raises(DuplicateTemplate) as exc:
        load_templates({"explicit": [("explicit.x", "+# to Strength"), ("explicit.x", "+# to Dexterity")]})
    assert exc.value.template_id == "explicit.x"


def test_duplicate_id_across_categories():
    """Ids are unique across the whole catalog, not just per category."""
    with pytest.raises(DuplicateTemplate):
        load_templates({
            "explicit": [("stat.x", "+# to Strength")],
            "crafted": [("stat.x", "+# to Strength")],
        })


def test_templates_are_immutable(sample_definitions):
    template = load_templates(sample_definitions)[0]
    with pytest.raises(AttributeError):
        template.id = "changed"


# ── render ───────────────────────────────────────────────

@pytest.mark.parametrize("text,values,expected", [
    ("+# to maximum Life", [42], "+42 to maximum Life"),
    ("Adds # to # Physical Damage", [5, 12], "Adds 5 to 12 Physical Damage"),
    ("Regenerate # Life per second", [1.5], "Regenerate 1.5 Life per second"),
    ("#% increased Attack Speed", [-10], "-10% increased Attack Speed"),
    ("Cannot be Frozen", [], "Cannot be Frozen"),
])
def test_render(text, values, expected):
    template = ModTemplate("t", ModCategory.EXPLICIT, parse_pattern("t", text))
    assert template.render(values) == expected


def test_render_wrong_value_count():
    template = ModTemplate("t", ModCategory.EXPLICIT, parse_pattern("t", "Adds # to # Fire Damage"))
    with pytest.raises(ValueError, match="Invalid number of mod values"):
        template.render([1])
    with pytest.raises(ValueError, match="Invalid number of mod values"):
        template.render([1, 2, 3])


@pytest.mark.parametrize("value,expected", [
    (42, "42"), (42.0, "42"), (1.5, "1.5"), (0.25, "0.25"), (-3, "-3"), (-0.5, "-0.5"),
    (1.2345678, "1.2345678"), (0.0001, "0.0001"), (1e-07, "0.0000001"), (-2.5e-08, "-0.000000025"),
])
def test_format_value(value, expected):
    assert format_value(value) == expected
