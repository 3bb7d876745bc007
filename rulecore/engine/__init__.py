"""
rulecore Engine

Card definitions are data. Everything a card does is decided on read.

Core systems:
- Ability Model: Closed set of keyword, protection and morph abilities
- Queries: Characteristics folded through continuous effects
- Interaction Resolver: Blocking, targeting, damage and attachment legality
- Morph Resolver: Face-down / face-up transition
- Combat Manager: Attack/block/damage
- Mana System: Cost parsing and payment
"""

from .types import (
    # IDs
    new_id,

    # Events
    Event, EventType, ActionResult,

    # Game objects
    GameObject, Characteristics, CardType, Color, ZoneType, Face, Rarity,
    TypeLine, FACE_DOWN_TYPE_LINE, FACE_DOWN_POWER, FACE_DOWN_TOUGHNESS,

    # Other
    Player, GameState, CardDefinition, CardMetadata,
)

from .errors import (
    RulesError, ConfigurationError, UnknownAbilityError,
    CardNotFoundError, ManaCostError, CatalogFormatError,
)

from .queries import (
    get_name, get_power, get_toughness, get_types, get_subtypes, get_colors,
    get_abilities, get_characteristics, has_ability, is_creature
)

from .effects import (
    Duration, ContinuousEffect, Modification,
    ModifyPT, SetBasePT, GrantAbilities, RemoveAbilities, RemoveAllAbilities,
    AddSubtypes, SetSubtypes, SetColors,
)

from .interaction import (
    is_protected_from, blocking_restriction,
    can_be_blocked_by, can_be_targeted_by, can_deal_damage_to, can_be_attached_by,
)

from .game import Game, make_creature, make_card

from .mana import (
    ManaSystem, ManaPool, ManaCost, ManaType, ManaUnit, PayCost,
    parse_cost, color_identity
)

from .combat import (
    CombatManager, CombatState, AttackDeclaration, BlockDeclaration
)

from .morph import MorphResolver, MorphState, morph_state

# Ability system
from .abilities import (
    ABILITY_MODEL_VERSION, Ability, ProtectionQuality,
    Keyword, KeywordAbility, Protection,
    FromColor, FromCardType, FromSubtype, FromName, FromEverything,
    Morph, TurnedFaceUpTrigger, check_ability, protection_from,
    FLYING, REACH, FEAR, SHADOW, HORSEMANSHIP, DEFENDER,
    HEXPROOF, SHROUD, INDESTRUCTIBLE,
)
