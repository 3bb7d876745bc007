"""
Portal (POR) Card Implementations

Vanilla creatures plus the flying/reach pair the combat tests lean on.
"""

from rulecore.engine import CardMetadata, Rarity, make_creature, FLYING, REACH


ARMORED_PEGASUS = make_creature(
    name="Armored Pegasus",
    power=1, toughness=2,
    mana_cost="{1}{W}",
    subtypes={"Pegasus"},
    abilities=[FLYING],
    metadata=CardMetadata(rarity=Rarity.COMMON),
)

BORDER_GUARD = make_creature(
    name="Border Guard",
    power=1, toughness=4,
    mana_cost="{2}{W}",
    subtypes={"Human", "Soldier"},
    metadata=CardMetadata(rarity=Rarity.COMMON),
)

GOBLIN_BULLY = make_creature(
    name="Goblin Bully",
    power=2, toughness=1,
    mana_cost="{1}{R}",
    subtypes={"Goblin"},
    metadata=CardMetadata(rarity=Rarity.COMMON),
)

GRIZZLY_BEARS = make_creature(
    name="Grizzly Bears",
    power=2, toughness=2,
    mana_cost="{1}{G}",
    subtypes={"Bear"},
    metadata=CardMetadata(rarity=Rarity.COMMON),
)

GIANT_SPIDER = make_creature(
    name="Giant Spider",
    power=2, toughness=4,
    mana_cost="{3}{G}",
    subtypes={"Spider"},
    abilities=[REACH],
    metadata=CardMetadata(rarity=Rarity.COMMON),
)


PORTAL_CARDS = {
    "Armored Pegasus": ARMORED_PEGASUS,
    "Border Guard": BORDER_GUARD,
    "Goblin Bully": GOBLIN_BULLY,
    "Grizzly Bears": GRIZZLY_BEARS,
    "Giant Spider": GIANT_SPIDER,
}
