# engine/payout.py
"""
Slip valuation: combined odds, accumulator bonus, tax and payout.

All money is computed in Decimal and never rounded here; rounding for
display belongs to whoever renders the numbers.
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..config import BONUS_CEILING, BONUS_TABLE, TAX_RATE
from ..exceptions import ConfigurationError, InvalidConfigError
from .types import Slip, Valuation

logger = logging.getLogger("engine.payout")

Number = Union[int, float, str, Decimal]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    # str() first so 0.1 becomes Decimal("0.1"), not its binary expansion
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class BonusSchedule:
    """Leg count -> bonus percent lookup with a flat ceiling past the table."""

    def __init__(
        self,
        table: Optional[Mapping[int, int]] = None,
        ceiling: int = BONUS_CEILING
    ):
        table = dict(BONUS_TABLE if table is None else table)
        if not table:
            raise ConfigurationError("Bonus table cannot be empty", config_key="BONUS_TABLE")

        legs = sorted(table)
        missing = sorted(set(range(legs[0], legs[-1] + 1)) - set(legs))
        if missing:
            raise ConfigurationError(
                f"Bonus table has no entry for {missing} legs",
                config_key="BONUS_TABLE"
            )
        for prev, cur in zip(legs, legs[1:]):
            if table[cur] < table[prev]:
                raise ConfigurationError(
                    f"Bonus table decreases between {prev} legs ({table[prev]}%) "
                    f"and {cur} legs ({table[cur]}%)",
                    config_key="BONUS_TABLE"
                )
        if ceiling < table[legs[-1]]:
            raise ConfigurationError(
                f"Bonus ceiling {ceiling}% is below the last table entry {table[legs[-1]]}%",
                config_key="BONUS_CEILING"
            )

        self.table: Dict[int, int] = table
        self.ceiling = ceiling
        self.min_legs = legs[0]
        self.max_legs = legs[-1]

    def percent_for(self, legs: int) -> int:
        if legs < self.min_legs:
            return 0
        if legs > self.max_legs:
            return self.ceiling
        return self.table[legs]

    def to_dict(self) -> Dict[str, object]:
        return {
            "table": {str(k): v for k, v in sorted(self.table.items())},
            "min_legs": self.min_legs,
            "max_legs": self.max_legs,
            "ceiling": self.ceiling,
        }


class PayoutCalculator:
    def __init__(
        self,
        bonus_schedule: Optional[BonusSchedule] = None,
        tax_rate: Number = TAX_RATE
    ):
        self.bonus_schedule = bonus_schedule or BonusSchedule()
        self.tax_rate = to_decimal(tax_rate)

    def total_odds(self, slip: Slip) -> Decimal:
        total = ONE
        for outcome in slip.outcomes:
            total *= to_decimal(outcome.match.odds_for(outcome.outcome))
        return total

    def valuate(self, slip: Slip, stake: Number) -> Valuation:
        """
        Value ``slip`` for a flat ``stake``. Pure: the slip is not modified.

        Raises:
            InvalidConfigError: If stake is negative or not finite
        """
        stake = to_decimal(stake)
        if not stake.is_finite() or stake < 0:
            raise InvalidConfigError(
                f"Stake must be a non-negative finite number (got {stake})", field="stake"
            )

        total_odds = self.total_odds(slip)
        legs = slip.legs
        bonus_percent = self.bonus_schedule.percent_for(legs)

        gross_profit = total_odds * stake - stake
        win_bonus = max(ZERO, gross_profit * bonus_percent / HUNDRED)
        gross_winnings = gross_profit + win_bonus
        tax = gross_winnings * self.tax_rate if gross_winnings > 0 else ZERO
        payout = (gross_winnings - tax) + stake

        return Valuation(
            total_odds=total_odds,
            stake=stake,
            legs=legs,
            bonus_percent=bonus_percent,
            win_bonus=win_bonus,
            tax=tax,
            payout=payout,
            gross_profit=gross_profit,
            gross_winnings=gross_winnings,
        )

    def annotate(self, slips: Iterable[Slip], stake: Number) -> List[Slip]:
        """Attach a valuation to every slip of a batch (same stake for all)."""
        stake = to_decimal(stake)
        valued = [slip.attach_valuation(self.valuate(slip, stake)) for slip in slips]
        logger.debug(f"[PAYOUT] Valued {len(valued)} slips at stake {stake}")
        return valued
