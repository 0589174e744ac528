"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Generator

from milhar_shop.app import ShopApp, create_app
from milhar_shop.config import Settings
from milhar_shop.domain.directory import UserDirectory
from milhar_shop.domain.games import GameCatalog
from milhar_shop.domain.ledger import BetLedger
from milhar_shop.domain.models import Bet, BetStatus, GameType
from milhar_shop.infrastructure.database.repositories import LocalStorage
from milhar_shop.infrastructure.database.session import create_session_factory, create_storage_engine


# Tuesday afternoon, local time; the week started on Sunday 2026-03-08
FIXED_NOW = datetime(2026, 3, 10, 15, 30).astimezone()


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_bet(
    bet_id: str,
    seller_id: str = "2",
    seller_name: str = "João Vendedor",
    game_type: GameType = GameType.MILHAR,
    number: str = "1234",
    amount: str = "10",
    placed_at: datetime = FIXED_NOW,
    status: BetStatus = BetStatus.ACTIVE,
    receipt_code: str = "AAAA0000",
) -> Bet:
    return Bet(
        id=bet_id,
        seller_id=seller_id,
        seller_name=seller_name,
        game_type=game_type,
        number=number,
        amount=Decimal(amount),
        placed_at=placed_at,
        status=status,
        receipt_code=receipt_code,
    )


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def bet_factory():
    return make_bet


@pytest.fixture
def storage_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'storage.db'}"


@pytest.fixture
def storage(storage_url: str) -> Generator[LocalStorage, None, None]:
    """Local storage backed by a throwaway SQLite file"""
    engine = create_storage_engine(storage_url)
    try:
        yield LocalStorage(create_session_factory(engine))
    finally:
        engine.dispose()


@pytest.fixture
def directory() -> UserDirectory:
    return UserDirectory()


@pytest.fixture
def ledger() -> BetLedger:
    """Empty ledger on the fixed clock"""
    return BetLedger(clock=fixed_clock)


@pytest.fixture
def seeded_ledger() -> BetLedger:
    """Bets from today, yesterday and earlier in the month across two sellers"""
    bets = [
        make_bet("t1", amount="10", receipt_code="TODAY001"),
        make_bet("t2", game_type=GameType.CENTENA, number="567", amount="5", receipt_code="TODAY002"),
        make_bet(
            "t3",
            seller_id="3",
            seller_name="Maria Vendedora",
            game_type=GameType.DEZENA,
            number="89",
            amount="2",
            status=BetStatus.CANCELLED,
            receipt_code="TODAY003",
        ),
        make_bet("y1", amount="20", placed_at=FIXED_NOW - timedelta(days=1), receipt_code="YESTE001"),
        make_bet(
            "m1",
            seller_id="3",
            seller_name="Maria Vendedora",
            amount="50",
            placed_at=FIXED_NOW - timedelta(days=5),
            receipt_code="MONTH001",
        ),
        make_bet("p1", amount="7", placed_at=FIXED_NOW - timedelta(days=40), receipt_code="PREV0001"),
    ]
    return BetLedger(bets, catalog=GameCatalog(), clock=fixed_clock)


@pytest.fixture
def test_settings(storage_url: str) -> Settings:
    return Settings(storage_url=storage_url, log_level="WARNING", _env_file=None)


@pytest.fixture
def app(test_settings: Settings) -> Generator[ShopApp, None, None]:
    """Shop with demo bets, fixed clock and its own storage file"""
    shop = create_app(test_settings, clock=fixed_clock)
    try:
        yield shop
    finally:
        shop.shutdown()
