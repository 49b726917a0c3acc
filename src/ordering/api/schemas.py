"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CartItemSchema(BaseModel):
    product_id: str
    product_name: str | None = None
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=1, default=1)
    weight_label: str | None = None


class DeliveryDetailsSchema(BaseModel):
    full_name: str
    email: str
    phone: str
    whatsapp_number: str | None = None
    address: str
    city: str
    notes: str | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CartItemSchema):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "jasmine-5kg",
                    "product_name": "Jasmine Rice",
                    "unit_price": 120.0,
                    "quantity": 1,
                    "weight_label": "5kg",
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    quantity: int  # <= 0 removes the item


class ReplaceCartRequest(BaseModel):
    items: list[CartItemSchema]


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    items: list[CartItemSchema]
    delivery: DeliveryDetailsSchema
    payment_reference: str | None = None
    idempotency_key: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    order_id: str
    status: str
    notes: str | None = None
    tracking_number: str | None = None


class UpdateCustomerRequest(BaseModel):
    customer_id: str
    full_name: str | None = None
    phone: str | None = None
    notes: str | None = None


class GenerateDeliveryCodeRequest(BaseModel):
    order_id: str


class ConfirmDeliveryRequest(BaseModel):
    order_id: str
    confirmation_code: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    success: bool = True


class CartResponse(StatusResponse):
    items: list[CartItemSchema]
    total_items: int
    total_amount: float


class OrderResponse(StatusResponse):
    order: dict


class OrderListResponse(StatusResponse):
    orders: list[dict]


class CustomerResponse(StatusResponse):
    customer: dict


class CustomerListResponse(StatusResponse):
    customers: list[dict]


class DeliveryCodeResponse(StatusResponse):
    confirmation_code: str


class MessageResponse(StatusResponse):
    message: str


class WebhookResponse(StatusResponse):
    handled: bool
