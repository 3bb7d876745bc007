"""
Ability System

Abilities are declared once on a card definition as immutable values and
interpreted by the resolvers:

    FOOTHILL_GUIDE = make_creature(
        name="Foothill Guide",
        power=1, toughness=1,
        mana_cost="{W}",
        subtypes={"Human", "Cleric"},
        abilities=[protection_from("Goblin"), Morph("{W}")],
    )
    # Auto-generates text: "Protection from Goblins\nMorph {W}"

The variant set is closed (ABILITY_VARIANTS). Evaluating anything else
raises UnknownAbilityError.
"""

# Base classes
from .base import (
    ABILITY_MODEL_VERSION,
    Ability,
    ProtectionQuality,
)

# Variants
from .keywords import (
    Keyword,
    KEYWORD_REMINDER_TEXT,
    KeywordAbility,
    Protection,
    FromColor,
    FromCardType,
    FromSubtype,
    FromName,
    FromEverything,
    Morph,
    TurnedFaceUpTrigger,
    ABILITY_VARIANTS,
    PROTECTION_QUALITIES,
    check_ability,
    protection_from,
    FLYING, REACH, FEAR, SHADOW, HORSEMANSHIP, DEFENDER,
    HEXPROOF, SHROUD, INDESTRUCTIBLE,
)

__all__ = [
    'ABILITY_MODEL_VERSION', 'Ability', 'ProtectionQuality',
    'Keyword', 'KEYWORD_REMINDER_TEXT', 'KeywordAbility',
    'Protection', 'FromColor', 'FromCardType', 'FromSubtype', 'FromName', 'FromEverything',
    'Morph', 'TurnedFaceUpTrigger',
    'ABILITY_VARIANTS', 'PROTECTION_QUALITIES', 'check_ability', 'protection_from',
    'FLYING', 'REACH', 'FEAR', 'SHADOW', 'HORSEMANSHIP', 'DEFENDER',
    'HEXPROOF', 'SHROUD', 'INDESTRUCTIBLE',
]
