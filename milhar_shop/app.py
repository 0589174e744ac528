"""Application root - builds and owns the shop's stores"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.engine import Engine

from milhar_shop.config import Settings, settings as default_settings
from milhar_shop.domain.directory import UserDirectory
from milhar_shop.domain.exceptions import AuthenticationError, PermissionDeniedError, ShopClosedError
from milhar_shop.domain.games import GameCatalog
from milhar_shop.domain.identity import IdentitySession
from milhar_shop.domain.ledger import BetLedger, seed_demo_bets
from milhar_shop.domain.models import Bet, DashboardStats, GameRule, GameType, Role, SellerFinancials, User
from milhar_shop.domain.reports import dashboard_stats, seller_financials
from milhar_shop.infrastructure.database.repositories import LocalStorage
from milhar_shop.infrastructure.database.session import create_session_factory, create_storage_engine
from milhar_shop.infrastructure.observability.logging import (
    log_bet_cancelled,
    log_bet_placed,
    log_login,
    setup_logging,
)
from milhar_shop.infrastructure.observability.metrics import bets_cancelled_counter, record_bet, record_login
from milhar_shop.utils.date_utils import now_local


class ShopApp:
    """
    Owns one identity session, one directory, one game catalog and one ledger.

    Views talk to these through the methods below, which add the role
    checks, logging and metrics the bare stores do not do.
    """

    def __init__(
        self,
        settings: Settings,
        directory: UserDirectory,
        session: IdentitySession,
        catalog: GameCatalog,
        ledger: BetLedger,
        clock: Callable[[], datetime] = now_local,
        engine: Optional[Engine] = None,
    ):
        self.settings = settings
        self.directory = directory
        self.session = session
        self.catalog = catalog
        self.ledger = ledger
        self._clock = clock
        self._engine = engine

    def login(self, username: str, password: str) -> User:
        try:
            user = self.session.login(username, password)
        except AuthenticationError:
            record_login(False)
            log_login(username, False)
            raise
        record_login(True)
        log_login(username, True)
        return user

    def logout(self) -> None:
        self.session.logout()

    def require_role(self, role: Role) -> User:
        """
        Current user, if logged in with the given role.

        Raises:
            PermissionDeniedError: If nobody is logged in or the role differs
        """
        user = self.session.current_user
        if user is None:
            raise PermissionDeniedError("Login required")
        if user.role != role:
            raise PermissionDeniedError(f"Operation requires the {role.value} role")
        return user

    def place_bet(self, game_type: GameType, number: str, amount) -> Bet:
        """
        Register a bet for the logged-in seller and return it for the receipt.

        Raises:
            PermissionDeniedError: If the current user is not a seller
            ShopClosedError: If operating hours are enforced and the shop is closed
            InvalidBetError: If number or amount are invalid for the game, or the
                game is switched off
        """
        seller = self.require_role(Role.SELLER)
        if self.settings.enforce_operating_hours and not self.catalog.hours.is_open(self._clock()):
            raise ShopClosedError("Bets are not accepted outside operating hours")

        bet = self.ledger.add_bet(seller.id, seller.name, game_type, number, amount)

        record_bet(bet.game_type.value, float(bet.amount))
        log_bet_placed(bet)
        return bet

    def cancel_bet(self, bet_id: str) -> Optional[Bet]:
        """Administrator cancels an active bet; unknown or settled bets are left as they are"""
        admin = self.require_role(Role.ADMIN)
        before = self.ledger.get_bet(bet_id)
        bet = self.ledger.cancel_bet(bet_id)
        if before is not None and before.is_active and bet is not None and not bet.is_active:
            bets_cancelled_counter.inc()
            log_bet_cancelled(bet, admin)
        return bet

    def toggle_game(self, game_type: GameType) -> GameRule:
        """Administrator switches a game type on or off for new bets"""
        admin = self.require_role(Role.ADMIN)
        rule = self.catalog.toggle_game(game_type)
        logging.info(
            "Game availability changed",
            extra={"game_type": rule.game_type.value, "active": rule.active, "admin_id": admin.id},
        )
        return rule

    def potential_prize(self, bet: Bet) -> Decimal:
        return self.catalog.potential_prize(bet.game_type, bet.amount)

    def dashboard(self) -> DashboardStats:
        self.require_role(Role.ADMIN)
        return dashboard_stats(
            self.ledger,
            self.directory,
            self.settings.default_commission_rate,
            recent_limit=self.settings.recent_bets_limit,
        )

    def my_financials(self) -> SellerFinancials:
        seller = self.require_role(Role.SELLER)
        return seller_financials(self.ledger, seller)

    def shutdown(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[LocalStorage] = None,
    clock: Callable[[], datetime] = now_local,
) -> ShopApp:
    """Create and configure the shop, restoring any session left by a previous run"""
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.service_name)

    engine = None
    if storage is None:
        engine = create_storage_engine(settings.storage_url)
        storage = LocalStorage(create_session_factory(engine))

    directory = UserDirectory()
    session = IdentitySession(directory, storage, clock=clock)
    restored = session.restore_session()
    if restored is not None:
        logging.info("Session restored", extra={"username": restored.username})

    catalog = GameCatalog(enforce_stake_limits=settings.enforce_stake_limits)
    initial_bets = seed_demo_bets(clock) if settings.seed_demo_bets else []
    ledger = BetLedger(initial_bets, catalog=catalog, clock=clock)

    return ShopApp(settings, directory, session, catalog, ledger, clock=clock, engine=engine)
