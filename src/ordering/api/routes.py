"""FastAPI routes for the Ordering domain: carts, orders, admin and delivery."""

import json

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from payments.gateway import get_gateway
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from shared.auth import AuthenticatedUser, admin_user, current_user

from ordering.api.schemas import (
    AddToCartRequest,
    CartItemSchema,
    CartResponse,
    ConfirmDeliveryRequest,
    CreateOrderRequest,
    CustomerListResponse,
    CustomerResponse,
    DeliveryCodeResponse,
    GenerateDeliveryCodeRequest,
    MessageResponse,
    OrderListResponse,
    OrderResponse,
    ReplaceCartRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateCustomerRequest,
    UpdateOrderStatusRequest,
    WebhookResponse,
)
from ordering.cart.cart import find_active_cart
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart, ReplaceCart
from ordering.customer.management import UpdateCustomer
from ordering.delivery.codes import ConfirmDelivery, GenerateDeliveryCode
from ordering.order.payment import RecordPayment
from ordering.order.placement import OrderService
from ordering.order.queries import list_all_orders, list_customers, list_orders
from ordering.order.status import UpdateOrderStatus

logger = structlog.get_logger(__name__)


def _cart_response(customer_id: str) -> CartResponse:
    cart = find_active_cart(customer_id)
    if cart is None:
        return CartResponse(items=[], total_items=0, total_amount=0.0)
    return CartResponse(
        items=[CartItemSchema(**item) for item in cart.snapshot()],
        total_items=cart.total_items,
        total_amount=cart.total_amount,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(user: AuthenticatedUser = Depends(current_user)) -> CartResponse:
    return _cart_response(user.user_id)


@cart_router.put("", response_model=CartResponse)
async def replace_cart(body: ReplaceCartRequest, user: AuthenticatedUser = Depends(current_user)) -> CartResponse:
    command = ReplaceCart(
        customer_id=user.user_id,
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(user.user_id)


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(user: AuthenticatedUser = Depends(current_user)) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=user.user_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, user: AuthenticatedUser = Depends(current_user)) -> CartResponse:
    command = AddToCart(
        customer_id=user.user_id,
        product_id=body.product_id,
        product_name=body.product_name,
        unit_price=body.unit_price,
        weight_label=body.weight_label,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(user.user_id)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateCartQuantityRequest,
    user: AuthenticatedUser = Depends(current_user),
) -> CartResponse:
    command = UpdateCartQuantity(
        customer_id=user.user_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(user.user_id)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(product_id: str, user: AuthenticatedUser = Depends(current_user)) -> CartResponse:
    current_domain.process(RemoveFromCart(customer_id=user.user_id, product_id=product_id), asynchronous=False)
    return _cart_response(user.user_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, user: AuthenticatedUser = Depends(current_user)) -> OrderResponse:
    order = OrderService().place_order(
        customer_id=user.user_id,
        items=[item.model_dump() for item in body.items],
        delivery_details=body.delivery.model_dump(),
        payment_reference=body.payment_reference,
        idempotency_key=body.idempotency_key,
    )
    return OrderResponse(order=order.to_dict())


@order_router.get("", response_model=OrderListResponse)
async def get_orders(user: AuthenticatedUser = Depends(current_user)) -> OrderListResponse:
    return OrderListResponse(orders=list_orders(user.user_id))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/orders", response_model=OrderListResponse)
async def get_all_orders(admin: AuthenticatedUser = Depends(admin_user)) -> OrderListResponse:
    return OrderListResponse(orders=list_all_orders())


@admin_router.patch("/orders", response_model=OrderResponse)
async def update_order_status(
    body: UpdateOrderStatusRequest,
    admin: AuthenticatedUser = Depends(admin_user),
) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=body.order_id,
        status=body.status,
        notes=body.notes,
        tracking_number=body.tracking_number,
        updated_by=admin.email,
    )
    order = current_domain.process(command, asynchronous=False)
    return OrderResponse(order=order)


@admin_router.get("/customers", response_model=CustomerListResponse)
async def get_customers(admin: AuthenticatedUser = Depends(admin_user)) -> CustomerListResponse:
    return CustomerListResponse(customers=list_customers())


@admin_router.patch("/customers", response_model=CustomerResponse)
async def update_customer(
    body: UpdateCustomerRequest,
    admin: AuthenticatedUser = Depends(admin_user),
) -> CustomerResponse:
    command = UpdateCustomer(
        customer_id=body.customer_id,
        full_name=body.full_name,
        phone=body.phone,
        notes=body.notes,
    )
    customer = current_domain.process(command, asynchronous=False)
    return CustomerResponse(customer=customer)


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/delivery", tags=["delivery"])


@delivery_router.post("/generate-code", response_model=DeliveryCodeResponse)
async def generate_delivery_code(
    body: GenerateDeliveryCodeRequest,
    user: AuthenticatedUser = Depends(current_user),
) -> DeliveryCodeResponse:
    command = GenerateDeliveryCode(order_id=body.order_id, customer_id=user.user_id)
    code = current_domain.process(command, asynchronous=False)
    return DeliveryCodeResponse(confirmation_code=code)


@delivery_router.post("/confirm", response_model=MessageResponse)
async def confirm_delivery(
    body: ConfirmDeliveryRequest,
    user: AuthenticatedUser = Depends(current_user),
) -> MessageResponse:
    command = ConfirmDelivery(
        order_id=body.order_id,
        customer_id=user.user_id,
        confirmation_code=body.confirmation_code,
    )
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Delivery confirmed successfully")


# ---------------------------------------------------------------------------
# Payment Webhook Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/webhook", response_model=WebhookResponse)
async def payment_webhook(
    request: Request,
    x_paystack_signature: str = Header(default=""),
) -> WebhookResponse:
    payload = (await request.body()).decode("utf-8")
    if not get_gateway().verify_webhook_signature(payload, x_paystack_signature):
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        event = json.loads(payload)
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed webhook payload") from None

    if event.get("event") != "charge.success":
        logger.info("Ignoring payment webhook", webhook_event=event.get("event"))
        return WebhookResponse(handled=False)

    data = event.get("data") or {}
    reference = data.get("reference")
    if not reference:
        raise HTTPException(status_code=400, detail="Missing payment reference")

    amount = data.get("amount")
    command = RecordPayment(
        payment_reference=reference,
        amount=amount / 100 if amount is not None else None,
    )
    try:
        current_domain.process(command, asynchronous=False)
    except ObjectNotFoundError:
        logger.warning("Payment webhook for unknown order", reference=reference)
        return WebhookResponse(handled=False)
    except ValidationError as exc:
        logger.warning("Payment webhook rejected by order", reference=reference, errors=exc.messages)
        return WebhookResponse(handled=False)
    return WebhookResponse(handled=True)
