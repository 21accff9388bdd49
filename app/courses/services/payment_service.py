"""
Payment collaborator used by the enrollment flow.

The platform never captures money itself: a gateway issues a reference
when a purchase starts and later vouches for that reference when the
client comes back to complete the enrollment.
"""

import re
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.core.config import settings
from app.core.constants import PAYMENT_REFERENCE_PATTERN
from app.core.exceptions import ValidationError


@dataclass(frozen=True)
class PaymentIntent:
    reference: str
    amount: Decimal
    method: str


class PaymentGateway(ABC):
    """Abstract base class for payment providers."""

    method: str

    @abstractmethod
    def create_payment(self, amount: Decimal) -> PaymentIntent:
        """
        Open a payment for ``amount``.

        Returns:
            PaymentIntent carrying the provider reference the client pays against
        """

    @abstractmethod
    def verify_reference(self, reference: str) -> None:
        """
        Check a reference handed back by the client.

        Raises:
            ValidationError: If the provider does not recognise the reference
        """


def generate_payment_reference() -> str:
    """
    Generate a payment reference in format: PAY-YYYYMMDD-XXXXXXXX

    Example: PAY-20260121-A3F94C0D
    """
    date_part = datetime.now().strftime("%Y%m%d")
    random_part = secrets.token_hex(4).upper()
    return f"PAY-{date_part}-{random_part}"


class SimulatedPaymentGateway(PaymentGateway):
    """Gateway that accepts any well-formed reference it could have issued."""

    _reference_re = re.compile(PAYMENT_REFERENCE_PATTERN)

    def __init__(self, method: str | None = None):
        self.method = method or settings.PAYMENT_METHOD

    def create_payment(self, amount: Decimal) -> PaymentIntent:
        return PaymentIntent(
            reference=generate_payment_reference(), amount=amount, method=self.method
        )

    def verify_reference(self, reference: str) -> None:
        if not self._reference_re.fullmatch(reference.strip()):
            raise ValidationError("Invalid payment reference", field="payment_reference")


def get_payment_gateway() -> PaymentGateway:
    return SimulatedPaymentGateway()
