"""
Onslaught (ONS) Card Implementations

Morph and protection-from-creature-type cards.
"""

from rulecore.engine import (
    Event, GameObject, Rarity, CardMetadata,
    make_creature, protection_from, Morph, TurnedFaceUpTrigger, FLYING,
)


def _common(collector_number: str = None) -> CardMetadata:
    return CardMetadata(rarity=Rarity.COMMON, collector_number=collector_number)


# =============================================================================
# WHITE
# =============================================================================

FOOTHILL_GUIDE = make_creature(
    name="Foothill Guide",
    power=1, toughness=1,
    mana_cost="{W}",
    subtypes={"Human", "Cleric"},
    abilities=[protection_from("Goblin"), Morph("{W}")],
    metadata=_common(),
)

GLORY_SEEKER = make_creature(
    name="Glory Seeker",
    power=2, toughness=2,
    mana_cost="{1}{W}",
    subtypes={"Human", "Soldier"},
    metadata=CardMetadata(
        rarity=Rarity.COMMON,
        flavor_text="The turning of the tide always begins with one soldier's decision to head back into the fray.",
    ),
)


# =============================================================================
# RED
# =============================================================================

GOBLIN_SKY_RAIDER = make_creature(
    name="Goblin Sky Raider",
    power=1, toughness=2,
    mana_cost="{2}{R}",
    subtypes={"Goblin", "Warrior"},
    abilities=[FLYING],
    metadata=_common(),
)


def skirk_marauder_turned_up(obj: GameObject, game, targets: tuple) -> list[Event]:
    """Deal 2 damage to the chosen target (a player or creature id)."""
    if not targets:
        return []
    return game.deal_damage(obj, targets[0], 2)


SKIRK_MARAUDER = make_creature(
    name="Skirk Marauder",
    power=2, toughness=1,
    mana_cost="{1}{R}",
    subtypes={"Lizard"},
    abilities=[
        Morph("{2}{R}"),
        TurnedFaceUpTrigger(
            effect=skirk_marauder_turned_up,
            text="it deals 2 damage to any target."
        ),
    ],
    metadata=_common(),
)


# =============================================================================
# GREEN
# =============================================================================

TREESPRING_LORIAN = make_creature(
    name="Treespring Lorian",
    power=5, toughness=4,
    mana_cost="{5}{G}",
    subtypes={"Beast"},
    abilities=[Morph("{5}{G}")],
    metadata=_common(),
)


ONSLAUGHT_CARDS = {
    "Foothill Guide": FOOTHILL_GUIDE,
    "Glory Seeker": GLORY_SEEKER,
    "Goblin Sky Raider": GOBLIN_SKY_RAIDER,
    "Skirk Marauder": SKIRK_MARAUDER,
    "Treespring Lorian": TREESPRING_LORIAN,
}
