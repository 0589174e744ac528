"""Bet ledger - authoritative in-memory list of bets and its aggregate queries"""

import re
import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, List, Optional

from milhar_shop.domain.exceptions import InvalidBetError
from milhar_shop.domain.games import GameCatalog
from milhar_shop.domain.models import Bet, BetStatus, GameType
from milhar_shop.domain.receipts import generate_receipt_code
from milhar_shop.utils.date_utils import local_date, now_local

_DIGITS = re.compile(r"[0-9]+")


def normalize_bet_input(game_type, number: str, amount) -> tuple[GameType, str, Decimal]:
    """
    Validate and coerce the fields of a new bet.

    Requirements:
    - game_type is one of milhar/centena/dezena
    - number has exactly as many decimal digits as the game requires
    - amount is a finite decimal greater than zero

    Raises:
        InvalidBetError: On any violation
    """
    try:
        game = GameType(game_type)
    except ValueError as e:
        raise InvalidBetError(f"Unknown game type: {game_type!r}") from e

    if not isinstance(number, str) or not _DIGITS.fullmatch(number) or len(number) != game.digits:
        raise InvalidBetError(f"{game.value} requires a {game.digits}-digit number, got {number!r}")

    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise InvalidBetError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite() or value <= 0:
        raise InvalidBetError(f"Amount must be greater than zero, got {amount!r}")

    return game, number, value


class BetLedger:
    """
    Holds every bet placed during the process lifetime, most recent first.

    Bets are frozen; cancellation swaps the stored record for an updated copy,
    so snapshots handed out earlier never change under the caller.
    """

    def __init__(
        self,
        bets: Optional[Iterable[Bet]] = None,
        catalog: Optional[GameCatalog] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._bets: List[Bet] = list(bets or [])
        self.catalog = catalog
        self._clock = clock

    @property
    def bets(self) -> List[Bet]:
        return list(self._bets)

    def __len__(self) -> int:
        return len(self._bets)

    def add_bet(self, seller_id: str, seller_name: str, game_type, number: str, amount) -> Bet:
        """Record a new active bet at the head of the ledger and return it"""
        game, number, value = normalize_bet_input(game_type, number, amount)
        if self.catalog is not None:
            self.catalog.check_available(game)
            if self.catalog.enforce_stake_limits:
                self.catalog.check_stake(game, value)

        bet = Bet(
            id=uuid.uuid4().hex,
            seller_id=seller_id,
            seller_name=seller_name,
            game_type=game,
            number=number,
            amount=value,
            placed_at=self._clock(),
            status=BetStatus.ACTIVE,
            receipt_code=generate_receipt_code(),
        )
        self._bets.insert(0, bet)
        return bet

    def cancel_bet(self, bet_id: str) -> Optional[Bet]:
        """
        Cancel an active bet.

        Unknown ids and bets that are already cancelled or paid are left
        untouched. Returns the bet as stored after the call, or None.
        """
        for i, bet in enumerate(self._bets):
            if bet.id == bet_id:
                if bet.status == BetStatus.ACTIVE:
                    bet = replace(bet, status=BetStatus.CANCELLED)
                    self._bets[i] = bet
                return bet
        return None

    def get_bet(self, bet_id: str) -> Optional[Bet]:
        return next((b for b in self._bets if b.id == bet_id), None)

    def find_by_receipt(self, receipt_code: str) -> Optional[Bet]:
        code = receipt_code.strip().upper()
        return next((b for b in self._bets if b.receipt_code == code), None)

    def bets_by_seller(self, seller_id: str) -> List[Bet]:
        return [b for b in self._bets if b.seller_id == seller_id]

    def todays_bets(self) -> List[Bet]:
        """Bets placed on the current local calendar date, any status"""
        today = local_date(self._clock())
        return [b for b in self._bets if local_date(b.placed_at) == today]

    def todays_total(self, seller_id: Optional[str] = None) -> Decimal:
        """Money at risk today: sum of today's active bets"""
        return sum(
            (
                b.amount
                for b in self.todays_bets()
                if b.status == BetStatus.ACTIVE and (seller_id is None or b.seller_id == seller_id)
            ),
            Decimal("0"),
        )

    def todays_count(self, seller_id: Optional[str] = None) -> int:
        """Bets placed today, cancelled ones included"""
        return sum(1 for b in self.todays_bets() if seller_id is None or b.seller_id == seller_id)

    def recent(self, limit: int = 5) -> List[Bet]:
        return self._bets[:limit]

    def search(
        self,
        term: str = "",
        game_type: Optional[GameType] = None,
        status: Optional[BetStatus] = None,
        seller_id: Optional[str] = None,
    ) -> List[Bet]:
        """
        Filter the ledger the way the bets management screen does.

        The term matches the bet number as a substring, and the seller name
        or receipt code case-insensitively. Empty term matches everything.
        With seller_id only that seller's bets are searched, as on the
        seller's own bets screen.
        """
        needle = term.strip().lower()
        results = []
        for bet in self._bets:
            if seller_id is not None and bet.seller_id != seller_id:
                continue
            if needle and not (
                needle in bet.number
                or needle in bet.seller_name.lower()
                or needle in bet.receipt_code.lower()
            ):
                continue
            if game_type is not None and bet.game_type != game_type:
                continue
            if status is not None and bet.status != status:
                continue
            results.append(bet)
        return results


def seed_demo_bets(clock: Callable[[], datetime] = now_local) -> List[Bet]:
    """Three bets placed "now" by the demo sellers joao and maria"""
    placed_at = clock()
    return [
        Bet("1", "2", "João Vendedor", GameType.MILHAR, "1234", Decimal("10"), placed_at, BetStatus.ACTIVE, "ABC12345"),
        Bet("2", "2", "João Vendedor", GameType.CENTENA, "567", Decimal("5"), placed_at, BetStatus.ACTIVE, "DEF67890"),
        Bet("3", "3", "Maria Vendedora", GameType.DEZENA, "89", Decimal("2"), placed_at, BetStatus.ACTIVE, "GHI11223"),
    ]
