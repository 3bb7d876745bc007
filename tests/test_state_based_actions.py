"""
State-Based Action Tests

Lethal damage, zero toughness, indestructible, and player loss. SBAs
repeat until nothing changes.
"""

from rulecore.engine import (
    EventType, Face, ModifyPT, ZoneType,
)


class TestCreatureDeath:

    def test_damage_alone_does_not_kill(self, game, players):
        alice, bob = players
        bears = game.create_object("Grizzly Bears", alice.id)
        bully = game.create_object("Goblin Bully", bob.id)

        game.deal_damage(bully, bears.id, 2)
        assert bears.zone == ZoneType.BATTLEFIELD

        events = game.check_state_based_actions()
        assert bears.zone == ZoneType.GRAVEYARD
        destroyed = [e for e in events if e.type == EventType.OBJECT_DESTROYED]
        assert destroyed[0].payload['reason'] == 'lethal_damage'

    def test_damage_accumulates(self, game, players):
        alice, bob = players
        guard = game.create_object("Border Guard", alice.id)  # 1/4
        bully = game.create_object("Goblin Bully", bob.id)

        game.deal_damage(bully, guard.id, 2)
        game.check_state_based_actions()
        assert guard.zone == ZoneType.BATTLEFIELD

        game.deal_damage(bully, guard.id, 2)
        game.check_state_based_actions()
        assert guard.zone == ZoneType.GRAVEYARD

    def test_zero_toughness(self, game, players):
        alice, _ = players
        bears = game.create_object("Grizzly Bears", alice.id)

        # add_effect runs SBAs itself
        game.add_effect(bears, ModifyPT(0, -2))
        assert bears.zone == ZoneType.GRAVEYARD
        assert game.state.effects == []

    def test_shrinking_below_damage_kills(self, game, players):
        alice, bob = players
        guard = game.create_object("Border Guard", alice.id)
        bully = game.create_object("Goblin Bully", bob.id)
        game.deal_damage(bully, guard.id, 2)

        game.add_effect(guard, ModifyPT(0, -2))
        assert guard.zone == ZoneType.GRAVEYARD

    def test_simultaneous_deaths_in_one_sweep(self, game, players):
        alice, bob = players
        bears = game.create_object("Grizzly Bears", alice.id)
        seeker = game.create_object("Glory Seeker", bob.id)
        bears.damage = 2
        seeker.damage = 3

        events = game.check_state_based_actions()
        assert bears.zone == seeker.zone == ZoneType.GRAVEYARD
        assert len([e for e in events if e.type == EventType.OBJECT_DESTROYED]) == 2
        assert game.check_state_based_actions() == []

    def test_non_creatures_are_ignored(self, game, players):
        alice, _ = players
        paint = game.create_object("Goblin War Paint", alice.id)
        paint.damage = 10

        assert game.check_state_based_actions() == []
        assert paint.zone == ZoneType.BATTLEFIELD


class TestIndestructible:

    def test_survives_lethal_damage(self, game, players):
        alice, bob = players
        colossus = game.create_object("Stone Colossus", alice.id)
        lorian = game.create_object("Treespring Lorian", bob.id)

        game.deal_damage(lorian, colossus.id, 5)
        game.check_state_based_actions()
        assert colossus.zone == ZoneType.BATTLEFIELD

    def test_ignores_destroy(self, game, players):
        alice, _ = players
        colossus = game.create_object("Stone Colossus", alice.id)

        assert game.destroy(colossus) == []
        assert colossus.zone == ZoneType.BATTLEFIELD

    def test_zero_toughness_still_kills(self, game, players):
        alice, _ = players
        colossus = game.create_object("Stone Colossus", alice.id)

        game.add_effect(colossus, ModifyPT(0, -3))
        assert colossus.zone == ZoneType.GRAVEYARD


class TestFaceDownDeath:

    def test_dead_morph_is_revealed(self, game, players):
        alice, bob = players
        hidden = game.create_object("Foothill Guide", alice.id, face_down=True)
        bully = game.create_object("Goblin Bully", bob.id)

        game.deal_damage(bully, hidden.id, 2)
        events = game.check_state_based_actions()

        assert hidden.zone == ZoneType.GRAVEYARD
        assert hidden.face == Face.UP
        assert hidden.damage == 0
        destroyed = next(e for e in events if e.type == EventType.OBJECT_DESTROYED)
        assert destroyed.payload['name'] == "Foothill Guide"

    def test_face_down_guide_is_not_protected(self, game, players):
        alice, bob = players
        hidden = game.create_object("Foothill Guide", alice.id, face_down=True)
        bully = game.create_object("Goblin Bully", bob.id)

        events = game.deal_damage(bully, hidden.id, 2)
        assert events[0].type == EventType.DAMAGE
        assert hidden.damage == 2


class TestPlayers:

    def test_player_at_zero_life_loses(self, game, players):
        alice, bob = players
        lorian = game.create_object("Treespring Lorian", alice.id)
        bob.life = 3

        game.deal_damage(lorian, bob.id, 5)
        events = game.check_state_based_actions()

        assert bob.life == -2
        assert bob.has_lost
        assert not alice.has_lost
        assert game.is_game_over()
        assert [e.type for e in events] == [EventType.PLAYER_LOSES]

    def test_loss_is_reported_once(self, game, players):
        _, bob = players
        bob.life = 0

        assert len(game.check_state_based_actions()) == 1
        assert game.check_state_based_actions() == []

    def test_three_player_game_continues(self, game, players):
        _, bob = players
        game.add_player("Carol")
        bob.life = 0
        game.check_state_based_actions()

        assert not game.is_game_over()


class TestEndOfTurn:

    def test_damage_wears_off(self, game, players):
        alice, bob = players
        guard = game.create_object("Border Guard", alice.id)
        bully = game.create_object("Goblin Bully", bob.id)
        game.deal_damage(bully, guard.id, 3)

        game.end_turn()
        assert guard.damage == 0
        assert game.state.active_player == bob.id
        assert game.state.turn_number == 2
