"""Financial reporting over ledger snapshots: dashboards, period summaries and daily closes"""

import uuid
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from milhar_shop.domain.directory import UserDirectory
from milhar_shop.domain.ledger import BetLedger
from milhar_shop.domain.models import (
    Bet,
    BetStatus,
    DailyClose,
    DashboardStats,
    PeriodSummary,
    SellerFinancials,
    User,
)
from milhar_shop.utils.date_utils import generate_date_range, local_date, start_of_month, start_of_week

CENTS = Decimal("0.01")


class ReportPeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def total_amount(bets: Iterable[Bet]) -> Decimal:
    return sum((b.amount for b in bets), Decimal("0"))


def commission_for(bets: Iterable[Bet], directory: UserDirectory, default_rate: Decimal) -> Decimal:
    """
    Commission owed on active bets, each at its own seller's rate.

    Sellers no longer in the directory are paid at default_rate.
    """
    owed = sum(
        (
            b.amount * directory.commission_rate_for(b.seller_id, default_rate) / 100
            for b in bets
            if b.status == BetStatus.ACTIVE
        ),
        Decimal("0"),
    )
    return to_cents(owed)


def dashboard_stats(
    ledger: BetLedger,
    directory: UserDirectory,
    default_rate: Decimal,
    recent_limit: int = 5,
) -> DashboardStats:
    """Administrator's view of the current day"""
    todays = ledger.todays_bets()
    total = ledger.todays_total()
    commission = commission_for(todays, directory, default_rate)

    return DashboardStats(
        total_wagered=total,
        bet_count=ledger.todays_count(),
        active_count=sum(1 for b in todays if b.status == BetStatus.ACTIVE),
        cancelled_count=sum(1 for b in todays if b.status == BetStatus.CANCELLED),
        sellers_today=len({b.seller_id for b in todays}),
        gross_profit=total,
        commission=commission,
        net_profit=to_cents(total - commission),
        recent_bets=ledger.recent(recent_limit),
    )


def bets_in_period(bets: Iterable[Bet], period: ReportPeriod, today: date) -> Tuple[Optional[date], List[Bet]]:
    """
    Select bets for a reporting period ending today.

    Returns the first day of the period (None for all time) and the bets.
    """
    period = ReportPeriod(period)
    if period == ReportPeriod.ALL:
        return None, list(bets)
    if period == ReportPeriod.TODAY:
        return today, [b for b in bets if local_date(b.placed_at) == today]

    start = start_of_week(today) if period == ReportPeriod.WEEK else start_of_month(today)
    return start, [b for b in bets if local_date(b.placed_at) >= start]


def period_summary(
    bets: Iterable[Bet],
    period: ReportPeriod,
    directory: UserDirectory,
    default_rate: Decimal,
    today: date,
) -> PeriodSummary:
    """Totals for the financial reports screen; cancelled money is reported apart"""
    start, selected = bets_in_period(bets, period, today)
    active = [b for b in selected if b.status == BetStatus.ACTIVE]
    cancelled = [b for b in selected if b.status == BetStatus.CANCELLED]

    wagered = total_amount(active)
    commission = commission_for(active, directory, default_rate)

    return PeriodSummary(
        period=ReportPeriod(period).value,
        start=start,
        total_wagered=wagered,
        total_cancelled=total_amount(cancelled),
        active_count=len(active),
        cancelled_count=len(cancelled),
        commission=commission,
        net_profit=to_cents(wagered - commission),
    )


def seller_financials(ledger: BetLedger, seller: User) -> SellerFinancials:
    sales = ledger.todays_total(seller.id)
    return SellerFinancials(
        seller_id=seller.id,
        sales_today=sales,
        commission_rate=seller.commission_rate,
        commission_today=to_cents(sales * seller.commission_rate / 100),
        bets_today=ledger.todays_count(seller.id),
        bets=ledger.bets_by_seller(seller.id),
    )


def close_day(
    bets: Iterable[Bet],
    day: date,
    directory: UserDirectory,
    default_rate: Decimal,
    seller_id: Optional[str] = None,
) -> DailyClose:
    """Closing record for one calendar day, shop-wide or for a single seller"""
    selected = [
        b for b in bets
        if local_date(b.placed_at) == day
        and b.status == BetStatus.ACTIVE
        and (seller_id is None or b.seller_id == seller_id)
    ]
    wagered = total_amount(selected)
    commission = commission_for(selected, directory, default_rate)

    return DailyClose(
        id=uuid.uuid4().hex,
        day=day,
        total_wagered=wagered,
        total_commission=commission,
        profit=to_cents(wagered - commission),
        seller_id=seller_id,
    )


def closing_history(
    bets: Iterable[Bet],
    start: date,
    end: date,
    directory: UserDirectory,
    default_rate: Decimal,
    seller_id: Optional[str] = None,
) -> List[DailyClose]:
    """One DailyClose per day from start to end inclusive, most recent first"""
    snapshot = list(bets)
    closes = [close_day(snapshot, day, directory, default_rate, seller_id) for day in generate_date_range(start, end)]
    return list(reversed(closes))
