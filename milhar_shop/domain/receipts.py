"""Receipt code generation for placed bets"""

import secrets
import string

RECEIPT_ALPHABET = string.ascii_uppercase + string.digits
RECEIPT_CODE_LENGTH = 8


def generate_receipt_code(length: int = RECEIPT_CODE_LENGTH) -> str:
    """
    Draw a short code printed on the customer's receipt.

    Each character is picked independently and uniformly from A-Z0-9.
    Codes are not checked against the ledger for collisions.
    """
    return "".join(secrets.choice(RECEIPT_ALPHABET) for _ in range(length))
