"""
Continuous Effect Tests

Characteristics are folded through the effect list on every read, in
timestamp order, and nothing is cached.
"""

from rulecore.engine import (
    Duration, ModifyPT, SetBasePT, GrantAbilities, RemoveAbilities, RemoveAllAbilities,
    AddSubtypes, SetSubtypes, SetColors, ContinuousEffect,
    Color, Keyword, ZoneType, EventType,
    get_power, get_toughness, get_subtypes, get_colors, get_abilities, has_ability,
    FLYING, KeywordAbility, make_creature, protection_from,
)


class TestPowerToughness:

    def test_modifiers_fold_in_timestamp_order(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, ModifyPT(1, 1))
        game.add_effect(bears, SetBasePT(0, 4))

        # +1/+1 first, then "base 0/4" overwrites it
        assert get_power(bears, game.state) == 0
        assert get_toughness(bears, game.state) == 4

    def test_later_pump_applies_after_set(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, SetBasePT(0, 4))
        game.add_effect(bears, ModifyPT(1, 1))

        assert get_power(bears, game.state) == 1
        assert get_toughness(bears, game.state) == 5

    def test_power_is_clamped_at_zero(self, game, players):
        alice, _ = players
        guard = game.create_object("Border Guard", alice.id)  # 1/4

        game.add_effect(guard, ModifyPT(-3, 0))
        assert get_power(guard, game.state) == 0
        assert get_toughness(guard, game.state) == 4

    def test_face_down_base_is_modified(self, game, players):
        alice, _ = players
        hidden = game.create_object("Treespring Lorian", alice.id, face_down=True)

        game.add_effect(hidden, ModifyPT(2, 0))
        assert get_power(hidden, game.state) == 4
        assert get_toughness(hidden, game.state) == 2

    def test_expired_effect_stops_applying(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, ModifyPT(3, 3), duration=Duration.END_OF_TURN)
        assert get_power(bears, game.state) == 5

        events = game.end_turn()
        assert get_power(bears, game.state) == 2
        assert any(e.type == EventType.EFFECT_EXPIRED for e in events)

    def test_permanent_effect_survives_end_of_turn(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, ModifyPT(1, 1), duration=Duration.PERMANENT)
        game.end_turn()
        assert get_power(bears, game.state) == 3


class TestAbilityEffects:

    def test_grant_flying(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, GrantAbilities((FLYING,)))
        assert has_ability(bears, Keyword.FLYING, game.state)

    def test_granting_twice_does_not_duplicate(self, game, players):
        alice, _ = players
        raider = game.create_object("Goblin Sky Raider", alice.id)

        game.add_effect(raider, GrantAbilities((FLYING,)))
        assert get_abilities(raider, game.state).count(FLYING) == 1

    def test_removal_beats_addition_on_same_timestamp(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        # Two effects created by one event share a timestamp
        ts = game.state.next_timestamp()
        game.state.effects.extend([
            ContinuousEffect(object_id=bears.id, modification=RemoveAbilities((FLYING,)), timestamp=ts),
            ContinuousEffect(object_id=bears.id, modification=GrantAbilities((FLYING,)), timestamp=ts),
        ])
        assert not has_ability(bears, Keyword.FLYING, game.state)

    def test_later_grant_overrides_earlier_loss(self, game, players):
        alice, _ = players
        guide = game.create_object("Foothill Guide", alice.id)

        game.add_effect(guide, RemoveAllAbilities())
        assert get_abilities(guide, game.state) == []

        game.add_effect(guide, GrantAbilities((FLYING,)))
        assert get_abilities(guide, game.state) == [FLYING]

    def test_lost_protection_stops_protecting(self, game, players):
        alice, _ = players
        guide = game.create_object("Foothill Guide", alice.id)

        game.add_effect(guide, RemoveAbilities((protection_from("Goblin"),)))
        assert not has_ability(guide, protection_from("Goblin"), game.state)

    def test_keywords_match_regardless_of_reminder_text(self, game, players):
        alice, _ = players
        drake = make_creature(
            "Reminder Drake", 2, 2, mana_cost="{1}{U}",
            abilities=[KeywordAbility(Keyword.FLYING, show_reminder=True)],
        )
        obj = game.create_object(drake, alice.id)

        game.add_effect(obj, GrantAbilities((FLYING,)))
        assert len(get_abilities(obj, game.state)) == 1

        game.add_effect(obj, RemoveAbilities((FLYING,)))
        assert not has_ability(obj, Keyword.FLYING, game.state)


class TestTypeAndColorEffects:

    def test_add_and_set_subtypes(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, AddSubtypes({"Goblin"}))
        assert get_subtypes(bears, game.state) == {"Bear", "Goblin"}

        game.add_effect(bears, SetSubtypes({"Elf"}))
        assert get_subtypes(bears, game.state) == {"Elf"}

    def test_set_colors(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, SetColors({Color.BLACK}))
        assert get_colors(bears, game.state) == {Color.BLACK}

    def test_effects_end_when_object_leaves_battlefield(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)
        game.add_effect(bears, ModifyPT(1, 1), duration=Duration.PERMANENT)

        game.move_object(bears, ZoneType.HAND)
        assert game.state.effects == []

    def test_effects_from_departed_source_end(self, game, players):
        alice, _ = players
        lord = game.create_object("Glory Seeker", alice.id)
        bears = game.create_object("Grizzly Bears", alice.id)

        game.add_effect(bears, ModifyPT(1, 1), duration=Duration.WHILE_SOURCE_ON_BATTLEFIELD, source=lord)
        game.add_effect(bears, ModifyPT(0, 1), duration=Duration.PERMANENT, source=lord)
        assert get_power(bears, game.state) == 3

        game.move_object(lord, ZoneType.GRAVEYARD)
        assert get_power(bears, game.state) == 2
        assert get_toughness(bears, game.state) == 3
