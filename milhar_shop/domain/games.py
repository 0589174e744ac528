"""Game configuration: stake limits, prize multipliers and operating hours"""

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from milhar_shop.domain.models import GameRule, GameType, OperatingHours
from milhar_shop.domain.exceptions import GameInactiveError, InvalidGameRuleError, StakeOutOfRangeError

NUMERIC_RULE_FIELDS = frozenset({"min_amount", "max_amount", "multiplier"})


DEFAULT_RULES: Dict[GameType, GameRule] = {
    GameType.MILHAR: GameRule(GameType.MILHAR, Decimal("1"), Decimal("100"), Decimal("4000")),
    GameType.CENTENA: GameRule(GameType.CENTENA, Decimal("1"), Decimal("200"), Decimal("600")),
    GameType.DEZENA: GameRule(GameType.DEZENA, Decimal("0.50"), Decimal("500"), Decimal("60")),
}


class GameCatalog:
    """Per-game rules edited by the administrator"""

    def __init__(
        self,
        rules: Optional[Dict[GameType, GameRule]] = None,
        hours: Optional[OperatingHours] = None,
        enforce_stake_limits: bool = False,
    ):
        self._rules = dict(rules or DEFAULT_RULES)
        self.hours = hours or OperatingHours()
        self.enforce_stake_limits = enforce_stake_limits

    def rule(self, game_type: GameType) -> GameRule:
        return self._rules[GameType(game_type)]

    def rules(self) -> Dict[GameType, GameRule]:
        return dict(self._rules)

    def update_rule(self, game_type: GameType, **changes) -> GameRule:
        """
        Replace some of a game's stake limits or its multiplier.

        Raises:
            TypeError: For fields other than min_amount, max_amount, multiplier
            InvalidGameRuleError: If a value is not a number, limits are not
                positive, min exceeds max, or the multiplier is not positive
        """
        unknown = set(changes) - NUMERIC_RULE_FIELDS
        if unknown:
            raise TypeError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        values = {}
        for key, raw in changes.items():
            try:
                values[key] = Decimal(str(raw))
            except InvalidOperation as e:
                raise InvalidGameRuleError(f"Invalid {key}: {raw!r}") from e
            if not values[key].is_finite():
                raise InvalidGameRuleError(f"Invalid {key}: {raw!r}")

        updated = replace(self.rule(game_type), **values)
        if updated.min_amount <= 0 or updated.max_amount <= 0:
            raise InvalidGameRuleError("Stake limits must be positive")
        if updated.min_amount > updated.max_amount:
            raise InvalidGameRuleError("Minimum stake cannot exceed maximum stake")
        if updated.multiplier <= 0:
            raise InvalidGameRuleError("Multiplier must be positive")
        self._rules[updated.game_type] = updated
        return updated

    def set_active(self, game_type: GameType, active: bool) -> GameRule:
        updated = replace(self.rule(game_type), active=active)
        self._rules[updated.game_type] = updated
        return updated

    def toggle_game(self, game_type: GameType) -> GameRule:
        """Switch a game type on or off for new bets"""
        return self.set_active(game_type, not self.rule(game_type).active)

    def check_available(self, game_type: GameType) -> None:
        """Raise GameInactiveError when the game is switched off"""
        rule = self.rule(game_type)
        if not rule.active:
            raise GameInactiveError(f"{rule.game_type.value} is not accepting bets")

    def set_hours(self, **changes) -> OperatingHours:
        self.hours = replace(self.hours, **changes)
        return self.hours

    def check_stake(self, game_type: GameType, amount: Decimal) -> None:
        """Raise StakeOutOfRangeError when amount falls outside [min, max] for the game"""
        rule = self.rule(game_type)
        if not (rule.min_amount <= amount <= rule.max_amount):
            raise StakeOutOfRangeError(
                f"{rule.game_type.value} accepts stakes between {rule.min_amount} and {rule.max_amount}, got {amount}"
            )

    def potential_prize(self, game_type: GameType, amount: Decimal) -> Decimal:
        """Prize paid if the bet wins: stake times the game's multiplier"""
        return amount * self.rule(game_type).multiplier
