"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    ADMIN = "admin"
    SELLER = "seller"


class UserStatus(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


class GameType(str, Enum):
    """Numeric lottery modalities, named after how many digits they take"""

    MILHAR = "milhar"
    CENTENA = "centena"
    DEZENA = "dezena"

    @property
    def digits(self) -> int:
        return GAME_DIGITS[self]


GAME_DIGITS = {
    GameType.MILHAR: 4,
    GameType.CENTENA: 3,
    GameType.DEZENA: 2,
}


class BetStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    PAID = "paid"


@dataclass(frozen=True)
class User:
    """Roster member as seen by the rest of the system (never carries a password)"""

    id: str
    name: str
    username: str
    role: Role
    commission_rate: Decimal
    status: UserStatus
    created_at: datetime
    bet_limit: Optional[Decimal] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE


@dataclass(frozen=True)
class Bet:
    """Single wager recorded in the ledger"""

    id: str
    seller_id: str
    seller_name: str
    game_type: GameType
    number: str
    amount: Decimal
    placed_at: datetime
    status: BetStatus
    receipt_code: str

    @property
    def is_active(self) -> bool:
        return self.status == BetStatus.ACTIVE


@dataclass(frozen=True)
class GameRule:
    """Stake limits, prize multiplier and availability of one game type"""

    game_type: GameType
    min_amount: Decimal
    max_amount: Decimal
    multiplier: Decimal
    active: bool = True


@dataclass(frozen=True)
class OperatingHours:
    """Window in which the shop accepts bets, with an optional midday pause"""

    opens_at: time = time(8, 0)
    closes_at: time = time(22, 0)
    pause_start: time = time(12, 0)
    pause_end: time = time(14, 0)
    pause_enabled: bool = False

    def is_open(self, moment: datetime) -> bool:
        current = moment.time()
        if not (self.opens_at <= current < self.closes_at):
            return False
        if self.pause_enabled and self.pause_start <= current < self.pause_end:
            return False
        return True


@dataclass
class DashboardStats:
    """Figures shown on the administrator's daily dashboard"""

    total_wagered: Decimal
    bet_count: int
    active_count: int
    cancelled_count: int
    sellers_today: int
    gross_profit: Decimal
    commission: Decimal
    net_profit: Decimal
    recent_bets: List[Bet] = field(default_factory=list)


@dataclass
class PeriodSummary:
    """Financial report over a reporting period"""

    period: str
    start: Optional[date]
    total_wagered: Decimal
    total_cancelled: Decimal
    active_count: int
    cancelled_count: int
    commission: Decimal
    net_profit: Decimal


@dataclass
class SellerFinancials:
    """A seller's own sales and commission view"""

    seller_id: str
    sales_today: Decimal
    commission_rate: Decimal
    commission_today: Decimal
    bets_today: int
    bets: List[Bet] = field(default_factory=list)


@dataclass(frozen=True)
class DailyClose:
    """End-of-day closing record, shop-wide or for one seller"""

    id: str
    day: date
    total_wagered: Decimal
    total_commission: Decimal
    profit: Decimal
    seller_id: Optional[str] = None
