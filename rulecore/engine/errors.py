"""
Engine Errors

Configuration errors are fatal: they mean the card data and the engine
disagree, and continuing would produce wrong game outcomes.

Illegal actions are NOT exceptions. Actions return an ActionResult and
leave the game state untouched when rejected.
"""


class RulesError(Exception):
    """Base class for all rulecore errors."""


class ConfigurationError(RulesError):
    """Card data / engine mismatch."""


class UnknownAbilityError(ConfigurationError):
    """An ability value outside the closed ability model was evaluated."""

    def __init__(self, ability):
        self.ability = ability
        super().__init__(
            f"Unknown ability variant: {type(ability).__name__} ({ability!r})"
        )


class CardNotFoundError(ConfigurationError, KeyError):
    """A card name is not in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Card not found in catalog: {name!r}")

    def __str__(self) -> str:
        return self.args[0]


class ManaCostError(ConfigurationError, ValueError):
    """A mana cost string could not be parsed."""


class CatalogFormatError(ConfigurationError):
    """A serialized catalog is malformed or written for another ability model."""
