"""Customer management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.customer.customer import Customer
from ordering.domain import ordering


def upsert_customer(customer_id, email, full_name=None, phone=None):
    """Create or refresh the customer record. Must run inside a unit of work."""
    repo = current_domain.repository_for(Customer)
    try:
        customer = repo.get(customer_id)
        customer.refresh_contact(email=email, full_name=full_name, phone=phone)
    except ObjectNotFoundError:
        customer = Customer.register(customer_id=customer_id, email=email, full_name=full_name, phone=phone)
    repo.add(customer)
    return customer


@ordering.command(part_of="Customer")
class UpdateCustomer:
    customer_id = Identifier(required=True)
    full_name = String(max_length=255)
    phone = String(max_length=20)
    notes = Text()


@ordering.command_handler(part_of=Customer)
class ManageCustomerHandler:
    @handle(UpdateCustomer)
    def update_customer(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.update_profile(
            full_name=command.full_name,
            phone=command.phone,
            notes=command.notes,
        )
        repo.add(customer)
        return customer.to_dict()
