"""Customer aggregate: the contact record of someone who placed an order.

Customers are upserted whenever an order is placed and can be annotated by
administrators. Order statistics are not stored here; they are computed on
read from the customer's orders (see ``ordering.order.queries``).
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from ordering.domain import ordering


@ordering.aggregate
class Customer:
    customer_id = Identifier(identifier=True)
    email = String(max_length=255)
    full_name = String(max_length=255)
    phone = String(max_length=20)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, customer_id, email, full_name=None, phone=None):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            email=email,
            full_name=full_name,
            phone=phone,
            created_at=now,
            updated_at=now,
        )

    def refresh_contact(self, email=None, full_name=None, phone=None):
        """Take the latest contact details supplied at checkout."""
        if email:
            self.email = email
        if full_name:
            self.full_name = full_name
        if phone:
            self.phone = phone
        self.updated_at = datetime.now(UTC)

    def update_profile(self, full_name=None, phone=None, notes=None):
        if full_name is not None:
            self.full_name = full_name
        if phone is not None:
            self.phone = phone
        if notes is not None:
            self.notes = notes
        self.updated_at = datetime.now(UTC)

    def to_dict(self):
        return {
            "customer_id": str(self.customer_id),
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
