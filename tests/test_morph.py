"""
Morph Tests

Face-down permanents, the turn-face-up special action, and what changes
(and what doesn't) when a morph is revealed.
"""

import pytest

from rulecore.engine import (
    Game, EventType, Face, Keyword, ManaType, MorphState, ZoneType,
    AttackDeclaration, BlockDeclaration,
    morph_state, get_power, get_toughness, get_name, has_ability, protection_from,
    ModifyPT, GrantAbilities, FLYING, Duration,
)


def snapshot(game, obj):
    """Everything a rejected turn-face-up must leave alone."""
    return (
        obj.face,
        obj.zone,
        obj.damage,
        {pid: game.mana_system.get_pool(pid).total() for pid in game.state.players},
        len(game.state.effects),
    )


class TestTurnFaceUpRejections:

    def test_already_face_up(self, game, players):
        alice, _ = players
        guide = game.create_object("Foothill Guide", alice.id)
        game.add_mana(alice.id, "W")

        result = game.turn_face_up(guide.id, alice.id)
        assert not result.success
        assert result.message == "This creature is not face-down"
        assert game.mana_system.get_pool(alice.id).total() == 1

    def test_not_the_controller(self, game, players):
        alice, bob = players
        hidden = game.create_object("Foothill Guide", alice.id, face_down=True)
        game.add_mana(bob.id, "W")
        before = snapshot(game, hidden)

        result = game.turn_face_up(hidden.id, bob.id)
        assert not result.success
        assert result.message == "You don't control this permanent"
        assert snapshot(game, hidden) == before

    def test_no_morph_cost(self, game, players):
        alice, _ = players
        hidden = game.create_object("Glory Seeker", alice.id, face_down=True)
        game.add_mana(alice.id, "W", 5)

        result = game.turn_face_up(hidden.id, alice.id)
        assert not result.success
        assert "no morph cost" in result.message
        assert hidden.is_face_down

    def test_cannot_pay(self, game, players):
        alice, _ = players
        hidden = game.create_object("Foothill Guide", alice.id, face_down=True)
        game.add_mana(alice.id, ManaType.RED)
        before = snapshot(game, hidden)

        result = game.turn_face_up(hidden.id, alice.id)
        assert not result.success
        assert result.message == "Could not pay morph cost {W}"
        assert snapshot(game, hidden) == before
        assert morph_state(hidden) == MorphState.FACE_DOWN

    def test_unknown_object(self, game, players):
        alice, _ = players
        result = game.turn_face_up("missing", alice.id)
        assert not result.success
        assert "not found" in result.message

    def test_rejection_emits_no_events(self, game, players):
        alice, _ = players
        hidden = game.create_object("Treespring Lorian", alice.id, face_down=True)
        log_size = len(game.state.event_log)

        result = game.turn_face_up(hidden.id, alice.id)
        assert not result.success
        assert result.events == []
        assert len(game.state.event_log) == log_size


class TestTurnFaceUp:

    def test_foothill_guide_is_revealed(self, game, players):
        alice, _ = players
        hidden = game.create_object("Foothill Guide", alice.id, face_down=True)
        assert get_power(hidden, game.state) == 2

        game.add_mana(alice.id, "W")
        result = game.turn_face_up(hidden.id, alice.id)

        assert result.success
        assert hidden.face == Face.UP
        assert get_name(hidden, game.state) == "Foothill Guide"
        assert (get_power(hidden, game.state), get_toughness(hidden, game.state)) == (1, 1)
        assert has_ability(hidden, protection_from("Goblin"), game.state)
        assert game.mana_system.get_pool(alice.id).total() == 0

    def test_turned_face_up_event(self, game, players):
        alice, _ = players
        hidden = game.create_object("Treespring Lorian", alice.id, face_down=True)
        game.add_mana(alice.id, "G", 6)

        result = game.turn_face_up(hidden.id, alice.id)
        event = result.events[0]
        assert event.type == EventType.TURNED_FACE_UP
        assert event.payload == {'object_id': hidden.id, 'name': "Treespring Lorian", 'cost': "{5}{G}"}
        assert event.controller == alice.id

    def test_face_up_is_terminal(self, game, players):
        alice, _ = players
        hidden = game.create_object("Foothill Guide", alice.id, face_down=True)
        game.add_mana(alice.id, "W", 2)

        assert game.turn_face_up(hidden.id, alice.id).success
        assert not game.turn_face_up(hidden.id, alice.id).success
        assert game.mana_system.get_pool(alice.id).total() == 1

    def test_effects_survive_the_flip(self, game, players):
        alice, _ = players
        hidden = game.create_object("Treespring Lorian", alice.id, face_down=True)
        game.add_effect(hidden, ModifyPT(1, 1))
        game.add_effect(hidden, GrantAbilities((FLYING,)), duration=Duration.PERMANENT)
        assert get_power(hidden, game.state) == 3
        assert has_ability(hidden, Keyword.FLYING, game.state)

        game.add_mana(alice.id, "G", 6)
        game.turn_face_up(hidden.id, alice.id)

        assert get_power(hidden, game.state) == 6
        assert get_toughness(hidden, game.state) == 5
        assert has_ability(hidden, Keyword.FLYING, game.state)

    def test_damage_stays_marked(self, game, players):
        alice, bob = players
        hidden = game.create_object("Treespring Lorian", alice.id, face_down=True)
        bully = game.create_object("Goblin Bully", bob.id)
        game.deal_damage(bully, hidden.id, 1)

        game.add_mana(alice.id, "G", 6)
        game.turn_face_up(hidden.id, alice.id)
        assert hidden.damage == 1


class TestTurnedFaceUpTrigger:

    def test_skirk_marauder_hits_player(self, game, players):
        alice, bob = players
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        game.add_mana(alice.id, "R", 3)

        result = game.turn_face_up(hidden.id, alice.id, targets=(bob.id,))
        assert result.success
        assert bob.life == 18
        assert [e.type for e in result.events][:2] == [EventType.TURNED_FACE_UP, EventType.DAMAGE]

    def test_skirk_marauder_kills_creature(self, game, players):
        alice, bob = players
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        bears = game.create_object("Grizzly Bears", bob.id)
        game.add_mana(alice.id, "R", 3)

        result = game.turn_face_up(hidden.id, alice.id, targets=(bears.id,))
        assert result.success
        assert bears.zone == ZoneType.GRAVEYARD
        assert any(e.type == EventType.OBJECT_DESTROYED for e in result.events)

    def test_protected_creature_cannot_be_targeted(self, game, players):
        alice, bob = players
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        knight = game.create_object("White Knight", bob.id)
        game.add_effect(knight, GrantAbilities((protection_from("Lizard"),)))
        game.add_mana(alice.id, "R", 3)
        before = snapshot(game, hidden)

        result = game.turn_face_up(hidden.id, alice.id, targets=(knight.id,))
        assert not result.success
        assert result.message == "Skirk Marauder can't target White Knight"
        assert snapshot(game, hidden) == before
        assert knight.damage == 0

    def test_shroud_cannot_be_targeted(self, game, players):
        alice, bob = players
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        wisp = game.create_object("Shrouded Wisp", bob.id)
        game.add_mana(alice.id, "R", 3)
        before = snapshot(game, hidden)

        result = game.turn_face_up(hidden.id, alice.id, targets=(wisp.id,))
        assert not result.success
        assert "can't target Shrouded Wisp" in result.message
        assert snapshot(game, hidden) == before
        assert wisp.zone == ZoneType.BATTLEFIELD

    def test_hexproof_only_stops_opponents(self, game, players):
        alice, bob = players
        theirs = game.create_object("Veiled Scout", bob.id)
        mine = game.create_object("Veiled Scout", alice.id)
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        game.add_mana(alice.id, "R", 3)

        assert not game.turn_face_up(hidden.id, alice.id, targets=(theirs.id,)).success
        assert game.turn_face_up(hidden.id, alice.id, targets=(mine.id,)).success
        assert mine.zone == ZoneType.GRAVEYARD
        assert theirs.zone == ZoneType.BATTLEFIELD

    def test_unknown_target_changes_nothing(self, game, players):
        alice, _ = players
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        game.add_mana(alice.id, "R", 3)
        before = snapshot(game, hidden)
        log_size = len(game.state.event_log)

        result = game.turn_face_up(hidden.id, alice.id, targets=("nope",))
        assert not result.success
        assert result.message == "Invalid target: nope"
        assert snapshot(game, hidden) == before
        assert len(game.state.event_log) == log_size

    def test_target_must_be_on_the_battlefield(self, game, players):
        alice, bob = players
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        bears = game.create_object("Grizzly Bears", bob.id, zone=ZoneType.GRAVEYARD)
        game.add_mana(alice.id, "R", 3)

        result = game.turn_face_up(hidden.id, alice.id, targets=(bears.id,))
        assert not result.success
        assert "not on the battlefield" in result.message
        assert hidden.is_face_down

    def test_no_target_no_damage(self, game, players):
        alice, bob = players
        hidden = game.create_object("Skirk Marauder", alice.id, face_down=True)
        game.add_mana(alice.id, "R", 3)

        assert game.turn_face_up(hidden.id, alice.id).success
        assert bob.life == 20


class TestInjectedPayment:

    @pytest.fixture
    def free_game(self, catalog):
        paid = []

        def pay_cost(player_id, cost):
            paid.append((player_id, cost.to_string()))
            return True

        game = Game(catalog=catalog, pay_cost=pay_cost)
        game.paid = paid
        return game

    def test_pay_cost_collaborator_is_used(self, free_game):
        alice = free_game.add_player("Alice")
        hidden = free_game.create_object("Treespring Lorian", alice.id, face_down=True)

        assert free_game.turn_face_up(hidden.id, alice.id).success
        assert free_game.paid == [(alice.id, "{5}{G}")]

    def test_refusing_collaborator_rejects(self, catalog):
        game = Game(catalog=catalog, pay_cost=lambda player_id, cost: False)
        alice = game.add_player("Alice")
        hidden = game.create_object("Foothill Guide", alice.id, face_down=True)

        assert not game.turn_face_up(hidden.id, alice.id).success
        assert hidden.is_face_down


class TestMorphInCombat:

    def test_revealed_guide_survives_goblin_attack(self, game, players):
        alice, bob = players
        hidden_guide = game.create_object("Foothill Guide", alice.id, face_down=True)
        bully = game.create_object("Goblin Bully", bob.id)
        combat = game.combat_manager

        assert combat.declare_attackers(bob.id, [AttackDeclaration(bully.id, alice.id)]).success
        assert combat.declare_blockers(alice.id, [BlockDeclaration(hidden_guide.id, bully.id)]).success

        game.add_mana(alice.id, "W")
        assert game.turn_face_up(hidden_guide.id, alice.id).success

        result = combat.combat_damage()
        assert result.success
        assert hidden_guide.zone == ZoneType.BATTLEFIELD
        assert hidden_guide.damage == 0
        assert bully.zone == ZoneType.GRAVEYARD
        assert any(e.type == EventType.DAMAGE_PREVENTED for e in result.events)
