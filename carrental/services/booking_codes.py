"""Issuance of human readable booking codes."""

import secrets
import string
import time

from carrental.config import BOOKING_CODE_PREFIX
from carrental.services.ledger_service import BookingLedger

_BASE36 = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


class BookingCodeIssuer:
    """
    Issues booking codes such as CRLZ4K1Q2M9F3A.

    A code is the prefix, the current time in milliseconds in base 36 and
    a random suffix. Codes already present in the ledger are skipped; the
    store's unique index on booking_code settles races between issuers.
    """

    def __init__(self, ledger: BookingLedger, prefix: str = BOOKING_CODE_PREFIX):
        self.ledger = ledger
        self.prefix = prefix

    def _candidate(self) -> str:
        timestamp = to_base36(int(time.time() * 1000))
        suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
        return f"{self.prefix}{timestamp}{suffix}"

    def issue(self) -> str:
        code = self._candidate()
        while self.ledger.code_exists(code):
            code = self._candidate()
        return code
