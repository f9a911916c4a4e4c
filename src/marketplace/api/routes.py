"""FastAPI endpoints for the marketplace."""

import json

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AddVariantRequest,
    CreateProductRequest,
    CuratorIdResponse,
    OrderListResponse,
    OrderResponse,
    PaymentIntentRequest,
    PaymentMethodsResponse,
    PaymentSettingsResponse,
    PaymentSettingsUpdateRequest,
    PlaceOrderRequest,
    PlaceOrderResponse,
    ProductIdResponse,
    ProductStatusRequest,
    ProductVariantsResponse,
    RegisterCuratorRequest,
    SetVariantStockRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
    UpdateProductDetailsRequest,
    VariantIdResponse,
    VariantResponse,
    VerifyPaymentRequest,
)
from marketplace.catalogue.creation import CreateProduct
from marketplace.catalogue.details import SetProductActive, UpdateProductDetails
from marketplace.catalogue.inventory import AddVariant, RemoveVariant, SetVariantStock
from marketplace.catalogue.queries import product_variants
from marketplace.curator.curator import Curator
from marketplace.curator.registration import RegisterCurator
from marketplace.ordering.cancellation import CancelOrder
from marketplace.ordering.checkout import PlaceOrder
from marketplace.ordering.queries import get_order, list_orders
from marketplace.ordering.status import RecordPaymentIntent, UpdateOrderStatus, VerifyManualPayment
from marketplace.payments.management import UpdatePaymentSettings, get_or_create_settings
from marketplace.payments.methods import payment_methods

curator_router = APIRouter(tags=["curators"])
product_router = APIRouter(prefix="/products", tags=["products"])
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
payment_router = APIRouter(tags=["payments"])


def current_user_id(x_user_id: str | None = Header(None)) -> str:
    """Authenticated user id, supplied by the gateway in ``X-User-Id``."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized - Login required")
    return x_user_id


def _order_responses(orders) -> list[OrderResponse]:
    """Order payloads with the curator (id, store name, slug) attached."""
    repo = current_domain.repository_for(Curator)
    curators = {curator_id: repo.get(curator_id) for curator_id in {str(o.curator_id) for o in orders}}
    return [OrderResponse.from_order(order, curators[str(order.curator_id)]) for order in orders]


def _order_response(order) -> OrderResponse:
    return _order_responses([order])[0]


# --- Curator endpoints ---


@curator_router.post("/curators", status_code=201, response_model=CuratorIdResponse)
async def register_curator(
    body: RegisterCuratorRequest, user_id: str = Depends(current_user_id)
) -> CuratorIdResponse:
    command = RegisterCurator(user_id=user_id, store_name=body.store_name, slug=body.slug)
    result = current_domain.process(command, asynchronous=False)
    return CuratorIdResponse(curator_id=result)


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, user_id: str = Depends(current_user_id)) -> ProductIdResponse:
    command = CreateProduct(
        user_id=user_id,
        title=body.title,
        description=body.description,
        price=body.price,
        category=body.category,
        tags=body.tags,
        sizes=body.sizes,
        colors=body.colors,
        stock_quantity=body.stock_quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product_details(
    product_id: str, body: UpdateProductDetailsRequest, user_id: str = Depends(current_user_id)
) -> StatusResponse:
    command = UpdateProductDetails(product_id=product_id, user_id=user_id, **body.model_dump(exclude_unset=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/status", response_model=StatusResponse)
async def set_product_status(
    product_id: str, body: ProductStatusRequest, user_id: str = Depends(current_user_id)
) -> StatusResponse:
    command = SetProductActive(product_id=product_id, user_id=user_id, is_active=body.is_active)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.get("/{product_id}/variants", response_model=ProductVariantsResponse)
async def list_variants(product_id: str) -> ProductVariantsResponse:
    result = product_variants(product_id)
    return ProductVariantsResponse(
        variants=[VariantResponse.from_variant(v) for v in result["variants"]],
        variant_map=result["variant_map"],
    )


@product_router.post("/{product_id}/variants", status_code=201, response_model=VariantIdResponse)
async def add_variant(
    product_id: str, body: AddVariantRequest, user_id: str = Depends(current_user_id)
) -> VariantIdResponse:
    command = AddVariant(
        product_id=product_id,
        user_id=user_id,
        size=body.size,
        color=body.color,
        stock_quantity=body.stock_quantity,
        sku=body.sku,
    )
    result = current_domain.process(command, asynchronous=False)
    return VariantIdResponse(variant_id=result)


# --- Inventory endpoints ---


@inventory_router.put("/{variant_id}", response_model=StatusResponse)
async def set_variant_stock(
    variant_id: str, body: SetVariantStockRequest, user_id: str = Depends(current_user_id)
) -> StatusResponse:
    command = SetVariantStock(
        variant_id=variant_id,
        user_id=user_id,
        stock_quantity=body.stock_quantity,
        sku=body.sku,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@inventory_router.delete("/{variant_id}", response_model=StatusResponse)
async def remove_variant(variant_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(RemoveVariant(variant_id=variant_id, user_id=user_id), asynchronous=False)
    return StatusResponse()


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def place_order(body: PlaceOrderRequest, user_id: str = Depends(current_user_id)) -> PlaceOrderResponse:
    command = PlaceOrder(
        buyer_id=user_id,
        items=json.dumps([line.model_dump() for line in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
        transaction_code=body.transaction_code,
        payment_proof=body.payment_proof,
    )
    order_ids = current_domain.process(command, asynchronous=False)
    return PlaceOrderResponse(orders=_order_responses([get_order(oid, user_id) for oid in order_ids]))


@order_router.get("", response_model=OrderListResponse)
async def orders(
    view: str = Query("buyer", pattern="^(buyer|curator)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(current_user_id),
) -> OrderListResponse:
    result = list_orders(user_id, view=view, page=page, limit=limit)
    return OrderListResponse(
        orders=_order_responses(result["orders"]),
        pagination=result["pagination"],
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return _order_response(get_order(order_id, user_id))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    current_domain.process(CancelOrder(order_id=order_id, user_id=user_id), asynchronous=False)
    return _order_response(get_order(order_id, user_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, user_id: str = Depends(current_user_id)
) -> OrderResponse:
    command = UpdateOrderStatus(order_id=order_id, user_id=user_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return _order_response(get_order(order_id, user_id))


@order_router.put("/{order_id}/verification", response_model=OrderResponse)
async def verify_payment(
    order_id: str, body: VerifyPaymentRequest, user_id: str = Depends(current_user_id)
) -> OrderResponse:
    command = VerifyManualPayment(order_id=order_id, user_id=user_id, approved=body.approved)
    current_domain.process(command, asynchronous=False)
    return _order_response(get_order(order_id, user_id))


@order_router.put("/{order_id}/payment-intent", response_model=OrderResponse)
async def record_payment_intent(
    order_id: str, body: PaymentIntentRequest, user_id: str = Depends(current_user_id)
) -> OrderResponse:
    command = RecordPaymentIntent(order_id=order_id, user_id=user_id, payment_intent_id=body.payment_intent_id)
    current_domain.process(command, asynchronous=False)
    return _order_response(get_order(order_id, user_id))


# --- Payment endpoints ---


@payment_router.get("/payment-methods", response_model=PaymentMethodsResponse)
async def available_payment_methods(curator_id: str = Query(...)) -> PaymentMethodsResponse:
    return PaymentMethodsResponse(**payment_methods(curator_id))


@payment_router.get("/curator/payment-settings", response_model=PaymentSettingsResponse)
async def curator_payment_settings(user_id: str = Depends(current_user_id)) -> PaymentSettingsResponse:
    curator = current_domain.repository_for(Curator).for_user(user_id)
    return PaymentSettingsResponse.from_settings(get_or_create_settings(curator.id, updated_by=user_id))


@payment_router.put("/curator/payment-settings", response_model=PaymentSettingsResponse)
async def update_payment_settings(
    body: PaymentSettingsUpdateRequest, user_id: str = Depends(current_user_id)
) -> PaymentSettingsResponse:
    command = UpdatePaymentSettings(user_id=user_id, changes=json.dumps(body.model_dump(exclude_unset=True)))
    current_domain.process(command, asynchronous=False)
    curator = current_domain.repository_for(Curator).for_user(user_id)
    return PaymentSettingsResponse.from_settings(get_or_create_settings(curator.id))
