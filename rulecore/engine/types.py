"""
rulecore Core Types

Card definitions are immutable and shared. Game objects are the mutable
runtime instances that point at them.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from .mana import ManaCost
    from .effects import ContinuousEffect


# =============================================================================
# IDs
# =============================================================================

def new_id() -> str:
    return str(uuid4())[:8]


# =============================================================================
# Event Types
# =============================================================================

class EventType(Enum):
    # Object lifecycle
    OBJECT_CREATED = auto()
    OBJECT_DESTROYED = auto()
    ZONE_CHANGE = auto()

    # State changes
    TAP = auto()
    UNTAP = auto()
    TURNED_FACE_UP = auto()

    # Combat
    ATTACK_DECLARED = auto()
    BLOCK_DECLARED = auto()
    DAMAGE = auto()
    DAMAGE_PREVENTED = auto()

    # Resources
    MANA_PRODUCED = auto()
    MANA_SPENT = auto()
    LIFE_CHANGE = auto()

    # Continuous effects
    EFFECT_CREATED = auto()
    EFFECT_EXPIRED = auto()

    # Turn structure
    TURN_END = auto()

    # Meta
    PLAYER_LOSES = auto()


@dataclass
class Event:
    type: EventType
    payload: dict = field(default_factory=dict)
    source: Optional[str] = None      # Object ID that caused this
    controller: Optional[str] = None  # Player ID who controls source
    id: str = field(default_factory=new_id)
    timestamp: int = 0


@dataclass
class ActionResult:
    """
    Outcome of a player action.

    Rejected actions (illegal, or unpaid cost) carry success=False and a
    message; the game state is exactly as it was before the attempt.
    """
    success: bool
    message: str = ""
    events: list[Event] = field(default_factory=list)

    @classmethod
    def ok(cls, events: list[Event] = None, message: str = "") -> 'ActionResult':
        return cls(success=True, message=message, events=events or [])

    @classmethod
    def rejected(cls, message: str) -> 'ActionResult':
        return cls(success=False, message=message)

    def __bool__(self) -> bool:
        return self.success


# =============================================================================
# Card Types
# =============================================================================

class CardType(Enum):
    CREATURE = auto()
    INSTANT = auto()
    SORCERY = auto()
    ENCHANTMENT = auto()
    ARTIFACT = auto()
    LAND = auto()
    PLANESWALKER = auto()


class Color(Enum):
    WHITE = 'W'
    BLUE = 'U'
    BLACK = 'B'
    RED = 'R'
    GREEN = 'G'


class ZoneType(Enum):
    LIBRARY = auto()
    HAND = auto()
    BATTLEFIELD = auto()
    GRAVEYARD = auto()
    STACK = auto()
    EXILE = auto()
    COMMAND = auto()


class Face(Enum):
    UP = auto()
    DOWN = auto()


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    MYTHIC = "mythic"
    SPECIAL = "special"
    BASIC_LAND = "basic_land"


# =============================================================================
# Type Line
# =============================================================================

@dataclass(frozen=True)
class TypeLine:
    """Structured type line: supertypes, card types, subtypes."""
    card_types: frozenset[CardType] = frozenset()
    subtypes: frozenset[str] = frozenset()
    supertypes: frozenset[str] = frozenset()

    @classmethod
    def creature(cls, *subtypes: str, supertypes=()) -> 'TypeLine':
        return cls(
            card_types=frozenset({CardType.CREATURE}),
            subtypes=frozenset(subtypes),
            supertypes=frozenset(supertypes),
        )

    @property
    def is_creature(self) -> bool:
        return CardType.CREATURE in self.card_types

    def render(self) -> str:
        left = [s.capitalize() for s in sorted(self.supertypes)]
        left += [t.name.capitalize() for t in sorted(self.card_types, key=lambda t: t.value)]
        text = " ".join(left)
        if self.subtypes:
            text += " — " + " ".join(sorted(self.subtypes))
        return text


# Face-down permanents are colorless, nameless 2/2 creatures with no abilities.
FACE_DOWN_TYPE_LINE = TypeLine(card_types=frozenset({CardType.CREATURE}))
FACE_DOWN_POWER = 2
FACE_DOWN_TOUGHNESS = 2


# =============================================================================
# Card Definition (template for creating objects)
# =============================================================================

@dataclass(frozen=True)
class CardMetadata:
    """Display-only data. Never read by rules code."""
    rarity: Optional[Rarity] = None
    collector_number: Optional[str] = None
    artist: Optional[str] = None
    flavor_text: Optional[str] = None
    image_uri: Optional[str] = None


@dataclass(frozen=True, eq=False)
class CardDefinition:
    """
    Immutable card record shared by every object created from it.

    Identity equality: two definitions are the same card only if they are
    the same catalog entry.
    """
    name: str
    mana_cost: 'ManaCost'
    type_line: TypeLine
    power: Optional[int] = None
    toughness: Optional[int] = None
    abilities: tuple = ()
    colors: Optional[frozenset[Color]] = None
    metadata: CardMetadata = field(default_factory=CardMetadata)
    text: str = ""

    def __post_init__(self):
        from .mana import ManaCost
        from .abilities.keywords import check_ability

        if isinstance(self.mana_cost, str) or self.mana_cost is None:
            object.__setattr__(self, 'mana_cost', ManaCost.parse(self.mana_cost or ""))
        object.__setattr__(self, 'abilities', tuple(self.abilities))
        for ability in self.abilities:
            check_ability(ability)
        if self.colors is None:
            object.__setattr__(self, 'colors', frozenset(self.mana_cost.colors))
        else:
            object.__setattr__(self, 'colors', frozenset(self.colors))
        if not self.text and self.abilities:
            object.__setattr__(self, 'text', self._generate_text())

    def _generate_text(self) -> str:
        """Generate rules text from abilities."""
        return "\n".join(ability.render_text(self.name) for ability in self.abilities)

    @property
    def is_creature(self) -> bool:
        return self.type_line.is_creature

    @property
    def morph_cost(self) -> Optional['ManaCost']:
        from .abilities.keywords import Morph

        for ability in self.abilities:
            if isinstance(ability, Morph):
                return ability.cost
        return None


# =============================================================================
# Characteristics (projected view)
# =============================================================================

@dataclass(frozen=True)
class Characteristics:
    """Current characteristics of an object after continuous effects."""
    name: Optional[str]
    type_line: TypeLine
    colors: frozenset[Color]
    power: Optional[int]
    toughness: Optional[int]
    abilities: tuple

    @property
    def types(self) -> frozenset[CardType]:
        return self.type_line.card_types

    @property
    def subtypes(self) -> frozenset[str]:
        return self.type_line.subtypes


# =============================================================================
# Game Objects
# =============================================================================

@dataclass
class GameObject:
    """A card instance in a zone."""
    id: str
    card_def: CardDefinition            # Shared, never copied
    owner: str                          # Player ID
    controller: str                     # Player ID
    zone: ZoneType
    face: Face = Face.UP
    damage: int = 0
    tapped: bool = False

    # Timestamp of entering the current zone
    timestamp: int = 0

    @property
    def is_face_down(self) -> bool:
        return self.face == Face.DOWN

    def __repr__(self) -> str:
        shown = "face-down" if self.is_face_down else self.card_def.name
        return f"GameObject({self.id}, {shown}, {self.zone.name})"


# =============================================================================
# Player
# =============================================================================

@dataclass
class Player:
    id: str
    name: str
    life: int = 20
    has_lost: bool = False


# =============================================================================
# Game State
# =============================================================================

@dataclass
class GameState:
    """Complete state of one game. Nothing in it is shared with other games."""
    players: dict[str, Player] = field(default_factory=dict)
    objects: dict[str, GameObject] = field(default_factory=dict)

    # Continuous effects, kept in creation (timestamp) order
    effects: list['ContinuousEffect'] = field(default_factory=list)

    # Turn tracking
    active_player: Optional[str] = None
    turn_number: int = 1
    timestamp: int = 0  # Global timestamp counter

    # Event history
    event_log: list[Event] = field(default_factory=list)

    def next_timestamp(self) -> int:
        self.timestamp += 1
        return self.timestamp

    def objects_in(self, zone: ZoneType, controller: str = None) -> list[GameObject]:
        return [
            obj for obj in self.objects.values()
            if obj.zone == zone and (controller is None or obj.controller == controller)
        ]

    def effects_on(self, obj: GameObject) -> list['ContinuousEffect']:
        """Active effects applying to an object, oldest first."""
        return sorted(
            (e for e in self.effects if e.object_id == obj.id),
            key=lambda e: e.timestamp
        )

    def snapshot(self) -> dict[str, Any]:
        """Small summary used by logs and the API layer."""
        return {
            'turn': self.turn_number,
            'objects': len(self.objects),
            'effects': len(self.effects),
        }
