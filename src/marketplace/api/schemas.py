"""Pydantic request/response schemas for the marketplace API.

Amounts are integers in minor units (cents).
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PaymentMethodName = Literal["stripe", "yape", "plin"]


# --- Curator ---


class RegisterCuratorRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "store_name": "Alpaca Threads",
                    "slug": "alpaca-threads",
                }
            ]
        }
    }

    store_name: str = Field(..., max_length=120)
    slug: str = Field(..., max_length=120)


class CuratorIdResponse(BaseModel):
    curator_id: str


# --- Catalogue ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Alpaca Wool Sweater",
                    "description": "Hand-knitted in Cusco.",
                    "price": 5000,
                    "category": "knitwear",
                    "tags": "alpaca,handmade",
                    "sizes": "S,M,L",
                    "colors": "Red,Grey",
                    "stock_quantity": 30,
                }
            ]
        }
    }

    title: str = Field(..., max_length=255)
    description: str | None = None
    price: int = Field(..., ge=0)
    category: str | None = Field(None, max_length=100)
    tags: str | None = Field(None, max_length=500)
    sizes: str | None = Field(None, max_length=255)
    colors: str | None = Field(None, max_length=255)
    stock_quantity: int = Field(0, ge=0)


class UpdateProductDetailsRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=255)
    description: str | None = None
    price: int | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    tags: str | None = Field(None, max_length=500)


class ProductStatusRequest(BaseModel):
    is_active: bool


class ProductIdResponse(BaseModel):
    product_id: str


class AddVariantRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "size": "XL",
                    "color": "Red",
                    "stock_quantity": 4,
                    "sku": "SWEATER-RED-XL",
                }
            ]
        }
    }

    size: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., min_length=1, max_length=50)
    stock_quantity: int = Field(0, ge=0)
    sku: str | None = Field(None, max_length=100)


class SetVariantStockRequest(BaseModel):
    stock_quantity: int = Field(..., ge=0)
    sku: str | None = Field(None, max_length=100)


class VariantIdResponse(BaseModel):
    variant_id: str


class VariantResponse(BaseModel):
    id: str
    product_id: str
    size: str
    color: str
    stock_quantity: int
    sku: str | None = None
    available: bool

    @classmethod
    def from_variant(cls, variant) -> VariantResponse:
        return cls(
            id=str(variant.id),
            product_id=str(variant.product_id),
            size=variant.size,
            color=variant.color,
            stock_quantity=variant.stock_quantity or 0,
            sku=variant.sku,
            available=variant.is_available,
        )


class VariantAvailability(BaseModel):
    id: str
    stock_quantity: int
    available: bool


class ProductVariantsResponse(BaseModel):
    variants: list[VariantResponse]
    variant_map: dict[str, dict[str, VariantAvailability]]


# --- Orders ---


class CartLine(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    size: str | None = Field(None, max_length=50)
    color: str | None = Field(None, max_length=50)


class ShippingAddressSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=254)
    phone: str | None = Field(None, max_length=50)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 3, "size": "M", "color": "Red"}],
                    "shipping_address": {
                        "name": "Ana Quispe",
                        "email": "ana@example.com",
                        "phone": "+51 999 888 777",
                        "address": "Av. Larco 123",
                        "city": "Lima",
                        "state": "Lima",
                        "zip_code": "15074",
                        "country": "PE",
                    },
                    "payment_method": "yape",
                    "transaction_code": "YP-884213",
                }
            ]
        }
    }

    items: list[CartLine] = Field(..., min_length=1)
    shipping_address: ShippingAddressSchema
    payment_method: PaymentMethodName
    transaction_code: str | None = Field(None, max_length=100)
    payment_proof: str | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    title: str
    quantity: int
    unit_price: int
    line_total: int
    size: str | None = None
    color: str | None = None


class CuratorSummary(BaseModel):
    id: str
    store_name: str
    slug: str

    @classmethod
    def from_curator(cls, curator) -> CuratorSummary:
        return cls(id=str(curator.id), store_name=curator.store_name, slug=curator.slug)


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    curator_id: str
    curator: CuratorSummary | None = None
    status: str
    total_amount: int
    commission: int
    curator_amount: int
    commission_rate: float
    currency: str
    payment_method: str
    transaction_code: str | None = None
    payment_intent_id: str | None = None
    shipping_address: ShippingAddressSchema
    items: list[OrderItemResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None
    cancelled_at: datetime | None = None

    @classmethod
    def from_order(cls, order, curator=None) -> OrderResponse:
        address = order.shipping_address
        return cls(
            id=str(order.id),
            buyer_id=str(order.buyer_id),
            curator_id=str(order.curator_id),
            curator=CuratorSummary.from_curator(curator) if curator is not None else None,
            status=order.status,
            total_amount=order.total_amount,
            commission=order.commission,
            curator_amount=order.curator_amount,
            commission_rate=order.commission_rate,
            currency=order.currency,
            payment_method=order.payment_method,
            transaction_code=order.transaction_code,
            payment_intent_id=order.payment_intent_id,
            shipping_address=ShippingAddressSchema(
                name=address.name,
                email=address.email,
                phone=address.phone,
                address=address.address,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country,
            ),
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    title=item.title,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                    size=item.size,
                    color=item.color,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
            cancelled_at=order.cancelled_at,
        )


class PlaceOrderResponse(BaseModel):
    orders: list[OrderResponse]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    pagination: Pagination


class UpdateOrderStatusRequest(BaseModel):
    status: Literal["PENDING_PAYMENT", "PAID", "REJECTED", "CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED", "REFUNDED"]


class VerifyPaymentRequest(BaseModel):
    approved: bool


class PaymentIntentRequest(BaseModel):
    payment_intent_id: str = Field(..., min_length=1, max_length=255)


# --- Payment settings ---


class PaymentSettingsUpdateRequest(BaseModel):
    """Partial update. Fields left out are not touched; unknown fields are rejected."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "yape_enabled": True,
                    "yape_phone_number": "+51 987 654 321",
                    "commission_rate": 0.12,
                }
            ]
        },
    )

    stripe_enabled: bool | None = None
    yape_enabled: bool | None = None
    yape_phone_number: str | None = Field(None, max_length=50)
    yape_qr_code: str | None = Field(None, max_length=500)
    yape_instructions: str | None = None
    plin_enabled: bool | None = None
    plin_phone_number: str | None = Field(None, max_length=50)
    plin_qr_code: str | None = Field(None, max_length=500)
    plin_instructions: str | None = None
    default_payment_method: PaymentMethodName | None = None
    commission_rate: float | None = Field(None, ge=0, le=1)


class PaymentSettingsResponse(BaseModel):
    id: str
    curator_id: str
    stripe_enabled: bool
    yape_enabled: bool
    yape_phone_number: str | None = None
    yape_qr_code: str | None = None
    yape_instructions: str | None = None
    plin_enabled: bool
    plin_phone_number: str | None = None
    plin_qr_code: str | None = None
    plin_instructions: str | None = None
    default_payment_method: str
    commission_rate: float
    updated_by: str | None = None

    @classmethod
    def from_settings(cls, settings) -> PaymentSettingsResponse:
        return cls(
            id=str(settings.id),
            curator_id=str(settings.curator_id),
            stripe_enabled=bool(settings.stripe_enabled),
            yape_enabled=bool(settings.yape_enabled),
            yape_phone_number=settings.yape_phone_number,
            yape_qr_code=settings.yape_qr_code,
            yape_instructions=settings.yape_instructions,
            plin_enabled=bool(settings.plin_enabled),
            plin_phone_number=settings.plin_phone_number,
            plin_qr_code=settings.plin_qr_code,
            plin_instructions=settings.plin_instructions,
            default_payment_method=settings.default_payment_method,
            commission_rate=settings.commission_rate,
            updated_by=str(settings.updated_by) if settings.updated_by else None,
        )


class PaymentMethodInfo(BaseModel):
    id: str
    name: str
    type: str
    enabled: bool
    phone_number: str | None = None
    qr_code: str | None = None
    instructions: str | None = None


class PaymentMethodsResponse(BaseModel):
    methods: list[PaymentMethodInfo]
    default_method: str | None = None
    commission_rate: float


class StatusResponse(BaseModel):
    status: str = "ok"
