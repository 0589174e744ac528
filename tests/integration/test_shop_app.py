"""Integration tests for the application root and its durable session storage"""

import pytest
from decimal import Decimal
from datetime import datetime

from prometheus_client import REGISTRY

from milhar_shop.app import create_app
from milhar_shop.config import Settings
from milhar_shop.domain.exceptions import (
    AuthenticationError,
    GameInactiveError,
    InvalidBetError,
    PermissionDeniedError,
    ShopClosedError,
    StakeOutOfRangeError,
)
from milhar_shop.domain.identity import USER_KEY
from milhar_shop.domain.models import BetStatus, GameType, Role


def metric(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_local_storage_round_trip(storage):
    assert storage.get_item("missing") is None

    storage.set_item("k", "v1")
    storage.set_item("k", "v2")
    assert storage.get_item("k") == "v2"

    storage.remove_item("k")
    assert storage.get_item("k") is None
    storage.remove_item("k")  # Removing twice is harmless


def test_local_storage_clear(storage):
    storage.set_item("a", "1")
    storage.set_item("b", "2")

    storage.clear()

    assert storage.get_item("a") is None
    assert storage.get_item("b") is None


def test_create_app_seeds_demo_bets(app):
    assert len(app.ledger) == 3
    assert app.ledger.todays_total() == Decimal("17")
    assert app.session.current_user is None


def test_create_app_without_seed(test_settings, clock):
    settings = test_settings.model_copy(update={"seed_demo_bets": False})
    shop = create_app(settings, clock=clock)
    try:
        assert len(shop.ledger) == 0
    finally:
        shop.shutdown()


def test_session_survives_restart(test_settings, clock):
    first = create_app(test_settings, clock=clock)
    user = first.login("joao", "123456")
    first.shutdown()

    second = create_app(test_settings, clock=clock)
    try:
        assert second.session.current_user == user
        assert second.session.login_time == clock()
    finally:
        second.shutdown()


def test_logout_survives_restart(test_settings, clock):
    first = create_app(test_settings, clock=clock)
    first.login("admin", "admin123")
    first.logout()
    first.shutdown()

    second = create_app(test_settings, clock=clock)
    try:
        assert second.session.current_user is None
    finally:
        second.shutdown()


def test_corrupted_session_is_discarded_on_startup(test_settings, clock):
    first = create_app(test_settings, clock=clock)
    first.session.storage.set_item(USER_KEY, "{corrupted")
    first.shutdown()

    second = create_app(test_settings, clock=clock)
    try:
        assert second.session.current_user is None
        assert second.session.storage.get_item(USER_KEY) is None
    finally:
        second.shutdown()


def test_login_metrics(app):
    failures = metric("milhar_login_total", outcome="failure")
    successes = metric("milhar_login_total", outcome="success")

    with pytest.raises(AuthenticationError):
        app.login("admin", "nope")
    app.login("admin", "admin123")

    assert metric("milhar_login_total", outcome="failure") == failures + 1
    assert metric("milhar_login_total", outcome="success") == successes + 1


def test_place_bet_requires_seller(app):
    with pytest.raises(PermissionDeniedError):
        app.place_bet(GameType.MILHAR, "1234", 10)

    app.login("admin", "admin123")
    with pytest.raises(PermissionDeniedError):
        app.place_bet(GameType.MILHAR, "1234", 10)


def test_place_bet_uses_logged_in_seller(app):
    placed = metric("milhar_bets_placed_total", game_type="dezena")
    app.login("maria", "123456")

    bet = app.place_bet(GameType.DEZENA, "07", "3")

    assert bet.seller_id == "3"
    assert bet.seller_name == "Maria Vendedora"
    assert app.ledger.bets[0] == bet
    assert app.potential_prize(bet) == Decimal("180")
    assert metric("milhar_bets_placed_total", game_type="dezena") == placed + 1


def test_place_bet_invalid_number(app):
    app.login("joao", "123456")

    with pytest.raises(InvalidBetError):
        app.place_bet(GameType.MILHAR, "12", 10)
    assert len(app.ledger) == 3


def test_place_bet_outside_operating_hours(test_settings):
    settings = test_settings.model_copy(update={"enforce_operating_hours": True})
    late = datetime(2026, 3, 10, 23, 0).astimezone()
    shop = create_app(settings, clock=lambda: late)
    try:
        shop.login("joao", "123456")
        with pytest.raises(ShopClosedError):
            shop.place_bet(GameType.MILHAR, "1234", 10)
    finally:
        shop.shutdown()


def test_place_bet_with_stake_limits(test_settings, clock):
    settings = test_settings.model_copy(update={"enforce_stake_limits": True})
    shop = create_app(settings, clock=clock)
    try:
        shop.login("joao", "123456")
        with pytest.raises(StakeOutOfRangeError):
            shop.place_bet(GameType.MILHAR, "1234", 500)
        assert shop.place_bet(GameType.MILHAR, "1234", 100).amount == Decimal("100")
    finally:
        shop.shutdown()


def test_switched_off_game_refuses_bets(app):
    app.login("joao", "123456")
    with pytest.raises(PermissionDeniedError):
        app.toggle_game(GameType.MILHAR)
    app.logout()

    app.login("admin", "admin123")
    assert app.toggle_game(GameType.MILHAR).active is False
    app.logout()

    app.login("joao", "123456")
    with pytest.raises(GameInactiveError):
        app.place_bet(GameType.MILHAR, "1234", 10)
    assert len(app.ledger) == 3
    assert app.place_bet(GameType.CENTENA, "123", 10).status == BetStatus.ACTIVE


def test_cancel_bet_requires_admin(app):
    app.login("joao", "123456")

    with pytest.raises(PermissionDeniedError):
        app.cancel_bet("1")
    assert app.ledger.get_bet("1").status == BetStatus.ACTIVE


def test_cancel_bet_counts_only_real_transitions(app):
    app.login("admin", "admin123")
    cancelled = metric("milhar_bets_cancelled_total")

    assert app.cancel_bet("1").status == BetStatus.CANCELLED
    assert app.cancel_bet("1").status == BetStatus.CANCELLED
    assert app.cancel_bet("unknown") is None

    assert metric("milhar_bets_cancelled_total") == cancelled + 1


def test_dashboard_requires_admin(app):
    with pytest.raises(PermissionDeniedError):
        app.dashboard()

    app.login("admin", "admin123")
    stats = app.dashboard()

    assert stats.total_wagered == Decimal("17")
    assert stats.sellers_today == 2
    # joao 15 at 10% + maria 2 at 12%
    assert stats.commission == Decimal("1.74")


def test_my_financials(app):
    user = app.login("joao", "123456")
    assert user.role == Role.SELLER

    financials = app.my_financials()

    assert financials.sales_today == Decimal("15")
    assert financials.commission_today == Decimal("1.50")


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.default_commission_rate == Decimal("10")
    assert settings.enforce_stake_limits is False
    assert settings.recent_bets_limit == 5
