"""DeliveryConfirmation aggregate: a short code the customer enters on receipt.

A code is issued per order and stays outstanding until the customer submits
it. Outstanding codes are unique; confirmed codes may be reused later.
"""

import secrets
import string
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from ordering.delivery.events import DeliveryCodeIssued, DeliveryConfirmed
from ordering.domain import ordering

CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 10


class ConfirmationMethod(Enum):
    CODE = "code"


def generate_code():
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


@ordering.aggregate
class DeliveryConfirmation:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    confirmation_code = String(required=True, max_length=CODE_LENGTH, min_length=CODE_LENGTH)
    confirmed_at = DateTime()
    confirmation_method = String(choices=ConfirmationMethod)
    created_at = DateTime()

    @classmethod
    def issue(cls, order_id, customer_id, confirmation_code):
        now = datetime.now(UTC)
        confirmation = cls(
            order_id=order_id,
            customer_id=customer_id,
            confirmation_code=confirmation_code.upper(),
            created_at=now,
        )
        confirmation.raise_(
            DeliveryCodeIssued(
                confirmation_id=str(confirmation.id),
                order_id=str(order_id),
                customer_id=str(customer_id),
                issued_at=now,
            )
        )
        return confirmation

    @property
    def is_outstanding(self):
        return self.confirmed_at is None

    def confirm(self):
        if not self.is_outstanding:
            raise ValidationError({"confirmation_code": ["Delivery already confirmed"]})

        now = datetime.now(UTC)
        self.confirmed_at = now
        self.confirmation_method = ConfirmationMethod.CODE.value

        self.raise_(
            DeliveryConfirmed(
                confirmation_id=str(self.id),
                order_id=str(self.order_id),
                customer_id=str(self.customer_id),
                confirmation_method=self.confirmation_method,
                confirmed_at=now,
            )
        )


def outstanding_confirmations(**filters):
    repo = current_domain.repository_for(DeliveryConfirmation)
    return [c for c in repo._dao.query.filter(**filters).all().items if c.confirmed_at is None]


def unique_code(code_factory=generate_code):
    """Draw codes until one is not outstanding, giving up after MAX_CODE_ATTEMPTS."""
    for _ in range(MAX_CODE_ATTEMPTS):
        code = code_factory()
        if not outstanding_confirmations(confirmation_code=code):
            return code
    raise ValidationError({"confirmation_code": ["Failed to generate a unique confirmation code"]})
