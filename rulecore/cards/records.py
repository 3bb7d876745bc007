"""
Catalog file records

Pydantic models for catalogs stored as JSON. A file records the ability
model version it was written against; loading a file written for another
version is refused rather than guessed at.

    {
      "format_version": 1,
      "cards": [
        {
          "name": "Foothill Guide",
          "mana_cost": "{W}",
          "types": ["Creature"],
          "subtypes": ["Human", "Cleric"],
          "power": 1, "toughness": 1,
          "abilities": [
            {"kind": "protection", "quality": "subtype", "value": "Goblin"},
            {"kind": "morph", "cost": "{W}"}
          ],
          "metadata": {"rarity": "common"}
        }
      ]
    }

"When turned face up" triggers carry code and only exist in the Python
card registries.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from rulecore.engine import (
    ABILITY_MODEL_VERSION, CardDefinition, CardMetadata, CardType, Color, Rarity, TypeLine,
    Keyword, KeywordAbility, Protection, Morph, TurnedFaceUpTrigger,
    FromColor, FromCardType, FromSubtype, FromName, FromEverything,
    CatalogFormatError, ManaCostError, ManaCost,
)


# =============================================================================
# Abilities
# =============================================================================

class KeywordRecord(BaseModel):
    kind: Literal["keyword"] = "keyword"
    keyword: Keyword


class ProtectionRecord(BaseModel):
    kind: Literal["protection"] = "protection"
    quality: Literal["color", "card_type", "subtype", "name", "everything"]
    value: Optional[str] = None

    @model_validator(mode="after")
    def check_value(self) -> 'ProtectionRecord':
        if self.quality == "everything":
            return self
        if not self.value:
            raise ValueError(f"protection from {self.quality} needs a value")
        if self.quality == "color" and self.value.upper() not in Color.__members__:
            raise ValueError(f"Unknown color: {self.value}")
        if self.quality == "card_type" and self.value.upper() not in CardType.__members__:
            raise ValueError(f"Unknown card type: {self.value}")
        return self


class MorphRecord(BaseModel):
    kind: Literal["morph"] = "morph"
    cost: str

    @field_validator("cost")
    @classmethod
    def check_cost(cls, v: str) -> str:
        try:
            ManaCost.parse(v)
        except ManaCostError as e:
            raise ValueError(str(e)) from e
        return v


AbilityRecord = Annotated[
    Union[KeywordRecord, ProtectionRecord, MorphRecord],
    Field(discriminator="kind")
]


# =============================================================================
# Cards
# =============================================================================

class MetadataRecord(BaseModel):
    rarity: Optional[Rarity] = None
    collector_number: Optional[str] = None
    artist: Optional[str] = None
    flavor_text: Optional[str] = None
    image_uri: Optional[str] = None


class CardRecord(BaseModel):
    name: str = Field(min_length=1)
    mana_cost: str = ""
    types: list[str] = Field(min_length=1)
    subtypes: list[str] = Field(default_factory=list)
    supertypes: list[str] = Field(default_factory=list)
    power: Optional[int] = None
    toughness: Optional[int] = None
    colors: Optional[list[str]] = None
    abilities: list[AbilityRecord] = Field(default_factory=list)
    metadata: MetadataRecord = Field(default_factory=MetadataRecord)
    text: str = ""

    @field_validator("types")
    @classmethod
    def check_types(cls, v: list[str]) -> list[str]:
        for name in v:
            if name.upper() not in CardType.__members__:
                raise ValueError(f"Unknown card type: {name}")
        return v

    @field_validator("colors")
    @classmethod
    def check_colors(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        symbols = {c.value for c in Color}
        for symbol in v:
            if symbol.upper() not in symbols:
                raise ValueError(f"Unknown color symbol: {symbol}")
        return v

    @field_validator("mana_cost")
    @classmethod
    def check_mana_cost(cls, v: str) -> str:
        try:
            ManaCost.parse(v)
        except ManaCostError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def check_stats(self) -> 'CardRecord':
        is_creature = any(t.upper() == "CREATURE" for t in self.types)
        if is_creature and (self.power is None or self.toughness is None):
            raise ValueError(f"{self.name}: creatures need power and toughness")
        return self


class CatalogFile(BaseModel):
    format_version: int
    cards: list[CardRecord]


# =============================================================================
# Conversion
# =============================================================================

_QUALITY_BUILDERS = {
    "color": lambda v: FromColor(Color[v.upper()]),
    "card_type": lambda v: FromCardType(CardType[v.upper()]),
    "subtype": lambda v: FromSubtype(v),
    "name": lambda v: FromName(v),
    "everything": lambda v: FromEverything(),
}


def _ability_from_record(record) -> object:
    if isinstance(record, KeywordRecord):
        return KeywordAbility(record.keyword)
    if isinstance(record, ProtectionRecord):
        return Protection(_QUALITY_BUILDERS[record.quality](record.value))
    return Morph(record.cost)


def card_from_record(record: CardRecord) -> CardDefinition:
    """Build an immutable CardDefinition from a validated record."""
    colors = None
    if record.colors is not None:
        colors = {Color(c.upper()) for c in record.colors}
    return CardDefinition(
        name=record.name,
        mana_cost=record.mana_cost,
        type_line=TypeLine(
            card_types=frozenset(CardType[t.upper()] for t in record.types),
            subtypes=frozenset(record.subtypes),
            supertypes=frozenset(record.supertypes),
        ),
        power=record.power,
        toughness=record.toughness,
        abilities=tuple(_ability_from_record(a) for a in record.abilities),
        colors=colors,
        metadata=CardMetadata(**record.metadata.model_dump()),
        text=record.text,
    )


def _ability_to_record(ability, card_name: str):
    if isinstance(ability, KeywordAbility):
        return KeywordRecord(keyword=ability.keyword)
    if isinstance(ability, Morph):
        return MorphRecord(cost=ability.cost.to_string())
    if isinstance(ability, Protection):
        quality = ability.quality
        if isinstance(quality, FromColor):
            return ProtectionRecord(quality="color", value=quality.color.name.lower())
        if isinstance(quality, FromCardType):
            return ProtectionRecord(quality="card_type", value=quality.card_type.name.lower())
        if isinstance(quality, FromSubtype):
            return ProtectionRecord(quality="subtype", value=quality.subtype)
        if isinstance(quality, FromName):
            return ProtectionRecord(quality="name", value=quality.name)
        return ProtectionRecord(quality="everything")
    if isinstance(ability, TurnedFaceUpTrigger):
        raise CatalogFormatError(
            f"{card_name}: triggered abilities can't be written to a catalog file"
        )
    raise CatalogFormatError(f"{card_name}: can't serialize {ability!r}")


def card_to_record(card: CardDefinition) -> CardRecord:
    return CardRecord(
        name=card.name,
        mana_cost=card.mana_cost.to_string(),
        types=[t.name.capitalize() for t in sorted(card.type_line.card_types, key=lambda t: t.value)],
        subtypes=sorted(card.type_line.subtypes),
        supertypes=sorted(card.type_line.supertypes),
        power=card.power,
        toughness=card.toughness,
        colors=sorted(c.value for c in card.colors),
        abilities=[_ability_to_record(a, card.name) for a in card.abilities],
        metadata=MetadataRecord(
            rarity=card.metadata.rarity,
            collector_number=card.metadata.collector_number,
            artist=card.metadata.artist,
            flavor_text=card.metadata.flavor_text,
            image_uri=card.metadata.image_uri,
        ),
        text=card.text,
    )


def parse_catalog_file(raw: str) -> list[CardDefinition]:
    """
    Validate a JSON catalog and build its definitions.

    Raises CatalogFormatError for malformed files and for files written
    against a different ability model version.
    """
    try:
        data = CatalogFile.model_validate_json(raw)
    except ValidationError as e:
        raise CatalogFormatError(f"Invalid catalog file: {e}") from e

    if data.format_version != ABILITY_MODEL_VERSION:
        raise CatalogFormatError(
            f"Catalog written for ability model v{data.format_version}, "
            f"engine is v{ABILITY_MODEL_VERSION}"
        )
    return [card_from_record(r) for r in data.cards]


def dump_catalog_file(cards) -> str:
    data = CatalogFile(
        format_version=ABILITY_MODEL_VERSION,
        cards=[card_to_record(c) for c in cards],
    )
    return data.model_dump_json(indent=2)
