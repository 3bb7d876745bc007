"""
rulecore Mana System

Handles mana costs, mana pools, and mana payment.
Supports standard mana syntax: {W}, {U}, {B}, {R}, {G}, {C}, {X}, {1}, {2}, etc.
Also supports hybrid {W/U}, {2/W}, Phyrexian {W/P}, and snow {S}.

The engine never does mana bookkeeping on its own behalf: morph and other
costs are paid through a pay_cost(payer_id, cost) -> bool collaborator.
ManaSystem.pay_cost is the default one.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional
from enum import Enum

from .errors import ManaCostError
from .types import Color

logger = logging.getLogger(__name__)


PayCost = Callable[[str, 'ManaCost'], bool]


class ManaType(Enum):
    """All possible mana types."""
    WHITE = 'W'
    BLUE = 'U'
    BLACK = 'B'
    RED = 'R'
    GREEN = 'G'
    COLORLESS = 'C'  # Specifically colorless (Eldrazi, etc.)


COLOR_SYMBOLS = {
    'W': Color.WHITE,
    'U': Color.BLUE,
    'B': Color.BLACK,
    'R': Color.RED,
    'G': Color.GREEN,
}

_SYMBOL_RE = re.compile(r'\{([^{}]*)\}')
_COST_RE = re.compile(r'(\{[^{}]*\})*')


def _is_valid_symbol(symbol: str) -> bool:
    if symbol.isdigit():
        return True
    if symbol in COLOR_SYMBOLS or symbol in ('C', 'S', 'X'):
        return True
    if '/' in symbol:
        left, _, right = symbol.partition('/')
        if right == 'P':
            return left in COLOR_SYMBOLS
        if right in COLOR_SYMBOLS:
            return left in COLOR_SYMBOLS or left == '2'
    return False


@dataclass(frozen=True)
class ManaUnit:
    """A single unit of mana in a pool."""
    color: ManaType
    source_id: Optional[str] = None


@dataclass(frozen=True)
class ManaCost:
    """
    Parsed mana cost: the ordered sequence of mana symbols.

    Symbols are stored without braces, upper-cased, in printed order.
    """
    symbols: tuple[str, ...] = ()

    def _count(self, symbol: str) -> int:
        return sum(1 for s in self.symbols if s == symbol)

    @property
    def white(self) -> int:
        return self._count('W')

    @property
    def blue(self) -> int:
        return self._count('U')

    @property
    def black(self) -> int:
        return self._count('B')

    @property
    def red(self) -> int:
        return self._count('R')

    @property
    def green(self) -> int:
        return self._count('G')

    @property
    def colorless(self) -> int:
        return self._count('C')

    @property
    def snow(self) -> int:
        return self._count('S')

    @property
    def x_count(self) -> int:
        return self._count('X')

    @property
    def generic(self) -> int:
        return sum(int(s) for s in self.symbols if s.isdigit())

    @property
    def hybrid(self) -> list[tuple[str, str]]:
        """Hybrid symbols as (option1, option2), e.g. {W/U} -> ('W', 'U')."""
        pairs = []
        for s in self.symbols:
            if '/' in s and not s.endswith('/P'):
                left, _, right = s.partition('/')
                pairs.append((left, right))
        return pairs

    @property
    def phyrexian(self) -> list[str]:
        return [s[0] for s in self.symbols if s.endswith('/P')]

    @property
    def mana_value(self) -> int:
        """Mana value. X counts as 0; {2/W} counts as 2."""
        total = 0
        for s in self.symbols:
            if s.isdigit():
                total += int(s)
            elif s == 'X':
                continue
            elif s.startswith('2/'):
                total += 2
            else:
                total += 1
        return total

    @property
    def colors(self) -> set[Color]:
        """Get colors in this mana cost."""
        colors = set()
        for s in self.symbols:
            for part in s.split('/'):
                if part in COLOR_SYMBOLS:
                    colors.add(COLOR_SYMBOLS[part])
        return colors

    def is_free(self) -> bool:
        """Check if this cost is free (no mana required)."""
        return all(s == '0' for s in self.symbols)

    @classmethod
    def parse(cls, cost_string: str) -> 'ManaCost':
        """
        Parse a mana cost string.

        Examples:
            "{W}" -> 1 white
            "{2}{U}{U}" -> 2 generic, 2 blue
            "{X}{R}{R}" -> X, 2 red
            "{W/U}" -> 1 hybrid white/blue
            "{G/P}" -> 1 phyrexian green

        Raises ManaCostError on anything that is not a sequence of known
        symbols; a bad cost in card data is never silently dropped.
        """
        if cost_string is None:
            return cls()

        text = cost_string.strip()
        if not text:
            return cls()

        if not _COST_RE.fullmatch(text):
            raise ManaCostError(f"Malformed mana cost: {cost_string!r}")

        symbols = []
        for raw in _SYMBOL_RE.findall(text):
            symbol = raw.strip().upper()
            if not _is_valid_symbol(symbol):
                raise ManaCostError(
                    f"Unknown mana symbol {{{raw}}} in cost {cost_string!r}"
                )
            symbols.append(symbol)

        return cls(symbols=tuple(symbols))

    def to_string(self) -> str:
        """Convert back to mana cost string."""
        if not self.symbols:
            return ''
        return ''.join(f'{{{s}}}' for s in self.symbols)

    def __str__(self) -> str:
        return self.to_string()


class ManaPool:
    """
    A player's mana pool.

    Payment is computed against a copy and committed only on success, so
    a failed payment leaves the pool untouched.
    """

    def __init__(self):
        self.mana: list[ManaUnit] = []

    def add(self, color: ManaType, amount: int = 1, source_id: str = None):
        """Add mana to the pool."""
        for _ in range(amount):
            self.mana.append(ManaUnit(color=color, source_id=source_id))

    def get_count(self, color: ManaType = None) -> int:
        """Count mana in pool, optionally filtered by color."""
        if color is None:
            return len(self.mana)
        return sum(1 for unit in self.mana if unit.color == color)

    def total(self) -> int:
        """Total mana in pool."""
        return len(self.mana)

    def can_pay(self, cost: ManaCost, x_value: int = 0) -> bool:
        """Check if the pool can pay a mana cost."""
        return self._plan_payment(cost, x_value) is not None

    def pay(self, cost: ManaCost, x_value: int = 0) -> bool:
        """
        Actually pay a mana cost, removing mana from pool.
        Returns True if successful, False if unable to pay.
        """
        remaining = self._plan_payment(cost, x_value)
        if remaining is None:
            return False
        self.mana = remaining
        return True

    def _plan_payment(self, cost: ManaCost, x_value: int) -> Optional[list[ManaUnit]]:
        """
        Work out what would be left after paying, or None if unpayable.

        Order:
        1. Colored costs (W, U, B, R, G)
        2. Colorless costs (C) with colorless mana
        3. Hybrid costs (the option we hold more of)
        4. Phyrexian costs (mana only; life payment is a caller concern)
        5. Snow, X and generic costs with whatever is left
        """
        available = list(self.mana)

        def remove_mana(color: ManaType, count: int) -> bool:
            indices = [i for i, unit in enumerate(available) if unit.color == color][:count]
            if len(indices) < count:
                return False
            for i in reversed(indices):
                available.pop(i)
            return True

        def remove_any(count: int) -> bool:
            if len(available) < count:
                return False
            # Spend colorless first, then the most plentiful color
            for _ in range(count):
                counts = {}
                for unit in available:
                    counts[unit.color] = counts.get(unit.color, 0) + 1
                if ManaType.COLORLESS in counts:
                    pick = ManaType.COLORLESS
                else:
                    pick = max(counts, key=counts.get)
                remove_mana(pick, 1)
            return True

        def count_of(color: ManaType) -> int:
            return sum(1 for unit in available if unit.color == color)

        # 1. Colored costs
        for attr, mana_type in (
            ('white', ManaType.WHITE),
            ('blue', ManaType.BLUE),
            ('black', ManaType.BLACK),
            ('red', ManaType.RED),
            ('green', ManaType.GREEN),
        ):
            amount = getattr(cost, attr)
            if amount and not remove_mana(mana_type, amount):
                return None

        # 2. Colorless costs
        if cost.colorless and not remove_mana(ManaType.COLORLESS, cost.colorless):
            return None

        # 3. Hybrid costs
        for opt1, opt2 in cost.hybrid:
            options = [ManaType(o) for o in (opt1, opt2) if o in COLOR_SYMBOLS]
            options.sort(key=count_of, reverse=True)
            if options and count_of(options[0]) > 0:
                remove_mana(options[0], 1)
            elif opt1 == '2':
                if not remove_any(2):
                    return None
            else:
                return None

        # 4. Phyrexian costs
        for p in cost.phyrexian:
            if not remove_mana(ManaType(p), 1):
                return None

        # 5. Snow, X and generic
        generic_total = cost.generic + cost.snow + cost.x_count * x_value
        if generic_total and not remove_any(generic_total):
            return None

        return available

    def empty(self):
        """Empty the mana pool (end of step)."""
        self.mana.clear()

    def __repr__(self) -> str:
        counts = {}
        for unit in self.mana:
            counts[unit.color.value] = counts.get(unit.color.value, 0) + 1
        return f"ManaPool({counts})"


class ManaSystem:
    """
    Per-player mana pools for one game.
    """

    def __init__(self):
        self.pools: dict[str, ManaPool] = {}  # player_id -> ManaPool

    def get_pool(self, player_id: str) -> ManaPool:
        """Get or create a player's mana pool."""
        if player_id not in self.pools:
            self.pools[player_id] = ManaPool()
        return self.pools[player_id]

    def can_pay(self, player_id: str, cost: ManaCost, x_value: int = 0) -> bool:
        """Check if a player can pay a mana cost."""
        return self.get_pool(player_id).can_pay(cost, x_value)

    def pay_cost(self, player_id: str, cost: ManaCost, x_value: int = 0) -> bool:
        """Pay a mana cost from a player's pool."""
        paid = self.get_pool(player_id).pay(cost, x_value)
        if not paid:
            logger.debug("Player %s could not pay %s", player_id, cost)
        return paid

    def produce_mana(self, player_id: str, color: ManaType, amount: int = 1, source_id: str = None):
        """Add mana to a player's pool."""
        self.get_pool(player_id).add(color, amount, source_id=source_id)

    def empty_pools(self):
        """Empty all mana pools (step transition)."""
        for pool in self.pools.values():
            pool.empty()


# Convenience functions for card definitions
def parse_cost(cost_string: str) -> ManaCost:
    """Parse a mana cost string."""
    return ManaCost.parse(cost_string)


def color_identity(cost_string: str) -> set[Color]:
    """Get color identity from a mana cost string."""
    return ManaCost.parse(cost_string).colors
