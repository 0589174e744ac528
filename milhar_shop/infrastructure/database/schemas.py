"""Pydantic schemas for records serialised into local storage"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from milhar_shop.domain.models import Role, User, UserStatus


class StoredUser(BaseModel):
    """Session user as written under the milhar_user key (no password)"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    name: str
    username: str = Field(..., min_length=1)
    role: Role
    commission_rate: Decimal = Field(..., ge=0, le=100)
    status: UserStatus
    created_at: datetime
    bet_limit: Optional[Decimal] = None

    @classmethod
    def from_user(cls, user: User) -> "StoredUser":
        return cls(
            id=user.id,
            name=user.name,
            username=user.username,
            role=user.role,
            commission_rate=user.commission_rate,
            status=user.status,
            created_at=user.created_at,
            bet_limit=user.bet_limit,
        )

    def to_user(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            username=self.username,
            role=self.role,
            commission_rate=self.commission_rate,
            status=self.status,
            created_at=self.created_at,
            bet_limit=self.bet_limit,
        )
