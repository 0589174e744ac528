"""User directory - roster of administrators and sellers with their credentials"""

import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from milhar_shop.domain.exceptions import DuplicateUsernameError, InvalidSellerError
from milhar_shop.domain.models import Role, User, UserStatus
from milhar_shop.utils.date_utils import now_local

# Fields the seller form edits; everything else on a User is system-owned
EDITABLE_SELLER_FIELDS = frozenset({"name", "username", "commission_rate", "bet_limit"})


@dataclass
class RosterEntry:
    """User record plus the password it logs in with"""

    user: User
    password: str


def default_roster() -> List[RosterEntry]:
    """Demo roster: one administrator, two active sellers and one blocked seller"""
    return [
        RosterEntry(
            User("1", "Administrador", "admin", Role.ADMIN, Decimal("0"), UserStatus.ACTIVE,
                 datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)),
            "admin123",
        ),
        RosterEntry(
            User("2", "João Vendedor", "joao", Role.SELLER, Decimal("10"), UserStatus.ACTIVE,
                 datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc), Decimal("5000")),
            "123456",
        ),
        RosterEntry(
            User("3", "Maria Vendedora", "maria", Role.SELLER, Decimal("12"), UserStatus.ACTIVE,
                 datetime(2024, 1, 20, 14, 30, tzinfo=timezone.utc), Decimal("8000")),
            "123456",
        ),
        RosterEntry(
            User("4", "Pedro Santos", "pedro", Role.SELLER, Decimal("8"), UserStatus.BLOCKED,
                 datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc), Decimal("3000")),
            "123456",
        ),
    ]


def _to_decimal(field_name: str, value: Any) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidSellerError(f"Invalid {field_name}: {value!r}") from e
    if not number.is_finite():
        raise InvalidSellerError(f"Invalid {field_name}: {value!r}")
    return number


def clean_seller_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and coerce the seller form fields that are present.

    Requirements:
    - name and username are not blank (surrounding spaces are dropped)
    - commission_rate is a percentage between 0 and 100
    - bet_limit, when given, is not negative

    Raises:
        InvalidSellerError: On any violation
    """
    cleaned = dict(fields)
    for key in ("name", "username"):
        if key in cleaned:
            value = cleaned[key].strip() if isinstance(cleaned[key], str) else ""
            if not value:
                raise InvalidSellerError(f"Seller {key} cannot be blank")
            cleaned[key] = value

    if "commission_rate" in cleaned:
        rate = _to_decimal("commission rate", cleaned["commission_rate"])
        if not (0 <= rate <= 100):
            raise InvalidSellerError(f"Commission rate must be between 0 and 100, got {rate}")
        cleaned["commission_rate"] = rate

    if cleaned.get("bet_limit") is not None:
        limit = _to_decimal("bet limit", cleaned["bet_limit"])
        if limit < 0:
            raise InvalidSellerError(f"Bet limit cannot be negative, got {limit}")
        cleaned["bet_limit"] = limit

    return cleaned


class UserDirectory:
    """In-memory roster; the administrator manages sellers through it"""

    def __init__(self, entries: Optional[Iterable[RosterEntry]] = None):
        source = default_roster() if entries is None else entries
        self._entries: Dict[str, RosterEntry] = {e.user.id: e for e in source}

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user only if username, password and active status all match"""
        for entry in self._entries.values():
            if entry.user.username != username:
                continue
            password_ok = secrets.compare_digest(entry.password.encode(), password.encode())
            if password_ok and entry.user.is_active:
                return entry.user
        return None

    def get(self, user_id: str) -> Optional[User]:
        entry = self._entries.get(user_id)
        return entry.user if entry else None

    def users(self) -> List[User]:
        return [e.user for e in self._entries.values()]

    def sellers(self) -> List[User]:
        return [e.user for e in self._entries.values() if e.user.role == Role.SELLER]

    def search_sellers(self, term: str) -> List[User]:
        needle = term.strip().lower()
        return [
            s for s in self.sellers()
            if needle in s.name.lower() or needle in s.username.lower()
        ]

    def create_seller(
        self,
        name: str,
        username: str,
        password: str,
        commission_rate: Decimal = Decimal("10"),
        bet_limit: Optional[Decimal] = Decimal("5000"),
    ) -> User:
        """
        Add a new active seller.

        Raises:
            InvalidSellerError: If name or username is blank, or the commission
                rate is outside 0-100
            DuplicateUsernameError: If the username is already in the roster
        """
        fields = clean_seller_fields(
            {"name": name, "username": username, "commission_rate": commission_rate, "bet_limit": bet_limit}
        )
        self._ensure_username_free(fields["username"])
        user = User(
            id=uuid.uuid4().hex,
            role=Role.SELLER,
            status=UserStatus.ACTIVE,
            created_at=now_local(),
            **fields,
        )
        self._entries[user.id] = RosterEntry(user=user, password=password)
        return user

    def update_seller(self, user_id: str, password: Optional[str] = None, **changes) -> Optional[User]:
        """
        Edit name, username, commission or bet limit of a seller.

        A blank password keeps the current one. Returns None for unknown ids.

        Raises:
            TypeError: For any field other than the editable ones
            InvalidSellerError: If the user is not a seller or a value is invalid
            DuplicateUsernameError: If the new username is taken
        """
        unknown = set(changes) - EDITABLE_SELLER_FIELDS
        if unknown:
            raise TypeError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        entry = self._entries.get(user_id)
        if entry is None:
            return None
        if entry.user.role != Role.SELLER:
            raise InvalidSellerError("Only sellers can be edited")

        changes = clean_seller_fields(changes)
        if "username" in changes and changes["username"] != entry.user.username:
            self._ensure_username_free(changes["username"])
        entry.user = replace(entry.user, **changes)
        if password:
            entry.password = password
        return entry.user

    def toggle_status(self, user_id: str) -> Optional[User]:
        entry = self._entries.get(user_id)
        if entry is None:
            return None
        new_status = UserStatus.BLOCKED if entry.user.is_active else UserStatus.ACTIVE
        entry.user = replace(entry.user, status=new_status)
        return entry.user

    def remove_seller(self, user_id: str) -> bool:
        """Drop a user from the roster; bets keep their own seller name snapshot"""
        return self._entries.pop(user_id, None) is not None

    def commission_rate_for(self, user_id: str, default: Decimal) -> Decimal:
        user = self.get(user_id)
        return user.commission_rate if user is not None else default

    def _ensure_username_free(self, username: str) -> None:
        if any(e.user.username == username for e in self._entries.values()):
            raise DuplicateUsernameError(f"Username already in use: {username}")
