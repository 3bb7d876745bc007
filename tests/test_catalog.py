"""
Card Catalog Tests

Lookup, search, duplicate detection and the JSON catalog format.
"""

import json

import pytest

from rulecore.cards import (
    CardCatalog, ONSLAUGHT_CARDS, PORTAL_CARDS, TEST_CARDS, build_catalog,
)
from rulecore.cards.records import parse_catalog_file
from rulecore.engine import (
    CardType, Color, ABILITY_MODEL_VERSION,
    CardNotFoundError, CatalogFormatError, ConfigurationError,
    make_creature, protection_from, FLYING,
)


FOOTHILL_GUIDE_JSON = {
    "name": "Foothill Guide",
    "mana_cost": "{W}",
    "types": ["Creature"],
    "subtypes": ["Human", "Cleric"],
    "power": 1,
    "toughness": 1,
    "abilities": [
        {"kind": "protection", "quality": "subtype", "value": "Goblin"},
        {"kind": "morph", "cost": "{W}"},
    ],
    "metadata": {"rarity": "common"},
}


def catalog_json(*cards, version=ABILITY_MODEL_VERSION) -> str:
    return json.dumps({"format_version": version, "cards": list(cards)})


class TestLookup:

    def test_lookup_by_name(self, catalog):
        assert catalog.lookup("Foothill Guide") is ONSLAUGHT_CARDS["Foothill Guide"]

    def test_lookup_is_case_insensitive(self, catalog):
        assert catalog.lookup("foothill guide") is catalog.lookup("Foothill Guide")

    def test_unknown_card(self, catalog):
        with pytest.raises(CardNotFoundError) as exc_info:
            catalog.lookup("Llanowar Elves")
        assert "Llanowar Elves" in str(exc_info.value)

    def test_unknown_card_is_a_key_error(self, catalog):
        with pytest.raises(KeyError):
            catalog.lookup("Nope")

    def test_get_with_default(self, catalog):
        assert catalog.get("Nope") is None
        assert "Grizzly Bears" in catalog
        assert "Nope" not in catalog

    def test_contains_every_set(self, catalog):
        assert len(catalog) == len(TEST_CARDS) + len(ONSLAUGHT_CARDS) + len(PORTAL_CARDS)
        assert catalog.names() == sorted({**TEST_CARDS, **ONSLAUGHT_CARDS, **PORTAL_CARDS})

    def test_iteration_is_sorted(self, catalog):
        names = [card.name for card in catalog]
        assert names == sorted(names)


class TestSearch:

    def test_by_color_and_type(self, catalog):
        red_creatures = catalog.search(card_type=CardType.CREATURE, color=Color.RED)
        assert [c.name for c in red_creatures] == [
            "Goblin Bully", "Goblin Sky Raider", "Skirk Marauder", "Steppe Rider",
        ]

    def test_by_subtype(self, catalog):
        assert [c.name for c in catalog.search(subtype="goblin")] == ["Goblin Bully", "Goblin Sky Raider"]

    def test_by_name_substring(self, catalog):
        assert [c.name for c in catalog.search(name="GUIDE")] == ["Foothill Guide"]

    def test_non_creatures(self, catalog):
        assert [c.name for c in catalog.search(card_type=CardType.ENCHANTMENT)] == ["Goblin War Paint"]


class TestConstruction:

    def test_duplicate_names_are_rejected(self):
        with pytest.raises(ConfigurationError):
            CardCatalog([make_creature("Twin", 1, 1), make_creature("Twin", 2, 2)])

    def test_duplicates_differing_in_case_are_rejected(self):
        with pytest.raises(ConfigurationError):
            CardCatalog([make_creature("Twin", 1, 1), make_creature("TWIN", 1, 1)])

    def test_same_definition_twice_is_fine(self):
        twin = make_creature("Twin", 1, 1)
        assert len(CardCatalog([twin, twin])) == 1

    def test_registry_key_must_match_name(self):
        with pytest.raises(ConfigurationError):
            CardCatalog.from_registries({"Wrong": make_creature("Right", 1, 1)})

    def test_merge_rejects_collisions(self, catalog):
        with pytest.raises(ConfigurationError):
            catalog.merged(CardCatalog([make_creature("Grizzly Bears", 2, 2)]))

    def test_merge(self, catalog):
        merged = catalog.merged(CardCatalog([make_creature("Hill Giant", 3, 3, mana_cost="{3}{R}")]))
        assert len(merged) == len(catalog) + 1
        assert "Hill Giant" not in catalog


# =============================================================================
# JSON catalog files
# =============================================================================

class TestCatalogFiles:

    def test_parse_foothill_guide(self):
        [guide] = parse_catalog_file(catalog_json(FOOTHILL_GUIDE_JSON))

        builtin = ONSLAUGHT_CARDS["Foothill Guide"]
        assert guide.abilities == builtin.abilities
        assert guide.type_line == builtin.type_line
        assert guide.colors == {Color.WHITE}
        assert guide.morph_cost.to_string() == "{W}"
        assert guide.text == "Protection from Goblins\nMorph {W}"

    def test_file_round_trip(self, tmp_path):
        original = CardCatalog.from_registries(PORTAL_CARDS, TEST_CARDS)
        path = tmp_path / "cards.json"
        path.write_text(original.to_json(), encoding="utf-8")

        loaded = CardCatalog.from_json(path)
        assert loaded.names() == original.names()
        for card in original:
            copy = loaded.lookup(card.name)
            assert copy.abilities == card.abilities
            assert copy.type_line == card.type_line
            assert copy.colors == card.colors
            assert (copy.power, copy.toughness) == (card.power, card.toughness)
            assert copy.mana_cost.to_string() == card.mana_cost.to_string()

    def test_build_catalog_with_extra_file(self, tmp_path):
        extra = dict(FOOTHILL_GUIDE_JSON, name="Hillside Guide")
        path = tmp_path / "extra.json"
        path.write_text(catalog_json(extra), encoding="utf-8")

        catalog = build_catalog(path)
        assert "Hillside Guide" in catalog
        assert "Foothill Guide" in catalog

    def test_wrong_model_version_is_refused(self):
        with pytest.raises(CatalogFormatError, match="ability model"):
            parse_catalog_file(catalog_json(FOOTHILL_GUIDE_JSON, version=ABILITY_MODEL_VERSION + 1))

    @pytest.mark.parametrize("ability", [
        {"kind": "trample"},
        {"kind": "keyword", "keyword": "Trample"},
        {"kind": "protection", "quality": "subtype"},
        {"kind": "protection", "quality": "color", "value": "purple"},
        {"kind": "morph", "cost": "{Q}"},
    ])
    def test_unknown_or_malformed_ability_is_refused(self, ability):
        card = dict(FOOTHILL_GUIDE_JSON, abilities=[ability])
        with pytest.raises(CatalogFormatError):
            parse_catalog_file(catalog_json(card))

    def test_creature_needs_power_and_toughness(self):
        card = {k: v for k, v in FOOTHILL_GUIDE_JSON.items() if k != "power"}
        with pytest.raises(CatalogFormatError):
            parse_catalog_file(catalog_json(card))

    def test_not_json(self):
        with pytest.raises(CatalogFormatError):
            parse_catalog_file("{not json")

    def test_triggers_cannot_be_written(self):
        with pytest.raises(CatalogFormatError, match="Skirk Marauder"):
            CardCatalog.from_registries(ONSLAUGHT_CARDS).to_json()

    def test_protection_qualities_survive(self, tmp_path):
        card = make_creature(
            "Warded Pegasus", 1, 2, mana_cost="{1}{W}",
            abilities=[FLYING, protection_from(Color.BLACK), protection_from(CardType.ARTIFACT)],
        )
        path = tmp_path / "warded.json"
        path.write_text(CardCatalog([card]).to_json(), encoding="utf-8")

        assert CardCatalog.from_json(path).lookup("Warded Pegasus").abilities == card.abilities
