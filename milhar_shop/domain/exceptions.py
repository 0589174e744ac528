"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AuthenticationError(DomainException):
    """Credentials did not match an active roster entry"""

    pass


class PermissionDeniedError(DomainException):
    """Current user is missing or has the wrong role for the operation"""

    pass


class InvalidBetError(DomainException):
    """Bet number or amount violates the game's format"""

    pass


class StakeOutOfRangeError(InvalidBetError):
    """Bet amount is outside the configured limits for its game"""

    pass


class GameInactiveError(InvalidBetError):
    """Game type has been switched off by the administrator"""

    pass


class ShopClosedError(DomainException):
    """Bet placed outside operating hours"""

    pass


class DuplicateUsernameError(DomainException):
    """Username is already taken by another user"""

    pass


class InvalidGameRuleError(DomainException):
    """Game rule limits or multiplier are inconsistent"""

    pass


class InvalidSellerError(DomainException):
    """Seller fields are blank, out of range, or the user is not a seller"""

    pass
