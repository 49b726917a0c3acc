"""Read-side queries over orders and customers.

Orders are returned newest first, each with its line items, in a single
response shape shared by the customer and admin views.
"""

from protean.utils.globals import current_domain

from ordering.customer.customer import Customer
from ordering.order.order import OPEN_STATUSES, Order, OrderStatus


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


def _load(results):
    repo = current_domain.repository_for(Order)
    return [repo.get(o.id) for o in results]


def list_orders(customer_id):
    """The customer's orders with line items, newest first."""
    results = current_domain.repository_for(Order)._dao.query.filter(customer_id=str(customer_id)).all().items
    return [order.to_dict() for order in _newest_first(_load(results))]


def list_all_orders():
    results = current_domain.repository_for(Order)._dao.query.all().items
    return [order.to_dict() for order in _newest_first(_load(results))]


def customer_statistics(orders):
    """Derive order statistics for one customer from their orders."""
    statuses = [OrderStatus(o.status) for o in orders]
    order_count = len(orders)
    total_spent = sum(o.total_amount for o in orders)
    return {
        "order_count": order_count,
        "completed_order_count": sum(1 for s in statuses if s == OrderStatus.DELIVERED),
        "pending_order_count": sum(1 for s in statuses if s in OPEN_STATUSES),
        "total_spent": round(total_spent, 2),
        "average_order_value": round(total_spent / order_count, 2) if order_count else 0.0,
        "last_order_date": max(o.created_at for o in orders).isoformat() if orders else None,
    }


def list_customers():
    """Customers with statistics computed from their orders, most recent activity first."""
    customers = current_domain.repository_for(Customer)._dao.query.all().items
    orders = current_domain.repository_for(Order)._dao.query.all().items

    orders_by_customer = {}
    for order in orders:
        orders_by_customer.setdefault(str(order.customer_id), []).append(order)

    results = []
    for customer in customers:
        record = customer.to_dict()
        record.update(customer_statistics(orders_by_customer.get(str(customer.customer_id), [])))
        results.append(record)

    return sorted(results, key=lambda c: c["last_order_date"] or "", reverse=True)
