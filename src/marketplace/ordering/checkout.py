"""Checkout — turns a buyer's cart into one order per curator.

Everything is validated before anything is written. The orders and the stock
decrements are then persisted inside the command's unit of work, so a failed
reservation leaves neither orders nor partial decrements behind.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.variant import ProductVariant
from marketplace.config import DEFAULT_COMMISSION_RATE
from marketplace.domain import logger, marketplace
from marketplace.ordering.order import Order, ShippingAddress
from marketplace.ordering.reservation import StockLine, reserve_stock
from marketplace.payments.settings import MANUAL_PAYMENT_METHODS, PaymentMethod, PaymentSettings
from marketplace.shared.errors import InsufficientStockError, NotFoundError

ADDRESS_FIELDS = ("name", "email", "phone", "address", "city", "state", "zip_code", "country")


@marketplace.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, size?, color?}
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, max_length=20)
    transaction_code = String(max_length=100)
    payment_proof = Text()


def _parse_lines(items) -> list[StockLine]:
    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["Cart is empty"]})

    merged: dict[tuple, int] = {}
    for raw in items:
        try:
            quantity = int(raw.get("quantity", 0))
        except (TypeError, ValueError):
            quantity = 0
        if quantity < 1:
            raise ValidationError({"items": ["Every item needs a quantity of at least 1"]})
        if not raw.get("product_id"):
            raise ValidationError({"items": ["Every item needs a product_id"]})

        size = (raw.get("size") or "").strip() or None
        color = (raw.get("color") or "").strip() or None
        if bool(size) != bool(color):
            raise ValidationError({"items": ["Both size and color are required to select a variant"]})

        key = (str(raw["product_id"]), size, color)
        merged[key] = merged.get(key, 0) + quantity

    return [
        StockLine(product_id=product_id, quantity=quantity, size=size, color=color)
        for (product_id, size, color), quantity in merged.items()
    ]


def _parse_address(address) -> dict:
    if not isinstance(address, dict):
        raise ValidationError({"shipping_address": ["Shipping address is required"]})
    values = {field: address.get(field) for field in ADDRESS_FIELDS}
    ShippingAddress(**values)
    return values


def _validate_payment(method, transaction_code):
    allowed = {m.value for m in PaymentMethod}
    if method not in allowed:
        raise ValidationError({"payment_method": [f"Payment method must be one of {', '.join(sorted(allowed))}"]})
    if method in MANUAL_PAYMENT_METHODS and not transaction_code:
        raise ValidationError({"transaction_code": [f"A transaction code is required for {method} payments"]})


def _load_product(product_id) -> Product:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFoundError(f"Product not found: {product_id}", product_id=str(product_id)) from None
    if not product.is_active:
        raise NotFoundError(f"Product not available: {product.title}", product_id=str(product_id))
    return product


def _check_stock(line: StockLine, product: Product):
    variant_repo = current_domain.repository_for(ProductVariant)
    if line.has_variant:
        variant = variant_repo.get_combination(line.product_id, line.size, line.color)
        available, label = variant.stock_quantity or 0, variant.label
    else:
        # Stock of a product with variants lives in the variants only
        if variant_repo.has_variants(product.id):
            raise ValidationError(
                {"items": [f"Select a size and color for product '{product.title}'"]}
            )
        available, label = product.stock_quantity or 0, f"product '{product.title}'"
    if available < line.quantity:
        raise InsufficientStockError(label, available, line.quantity)


def _curator_terms(curator_id, payment_method) -> float:
    """Commission rate for the curator, after checking it accepts the method."""
    settings = current_domain.repository_for(PaymentSettings).find_for_curator(curator_id)
    if settings is None:
        enabled = payment_method == PaymentMethod.STRIPE.value
        rate = DEFAULT_COMMISSION_RATE
    else:
        enabled = settings.is_enabled(payment_method)
        rate = settings.commission_rate if settings.commission_rate is not None else DEFAULT_COMMISSION_RATE

    if not enabled:
        raise ValidationError(
            {"payment_method": [f"Payment method {payment_method} is not accepted by curator {curator_id}"]}
        )
    return rate


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items = json.loads(command.items) if isinstance(command.items, str) else command.items
        address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        lines = _parse_lines(items)
        shipping_address = _parse_address(address)
        _validate_payment(command.payment_method, command.transaction_code)

        # Group by curator, keeping cart order
        products: dict[str, Product] = {}
        groups: dict[str, list[StockLine]] = {}
        for line in lines:
            if line.product_id not in products:
                products[line.product_id] = _load_product(line.product_id)
            product = products[line.product_id]
            _check_stock(line, product)
            groups.setdefault(str(product.curator_id), []).append(line)

        rates = {curator_id: _curator_terms(curator_id, command.payment_method) for curator_id in groups}

        order_repo = current_domain.repository_for(Order)
        order_ids = []
        for curator_id, curator_lines in groups.items():
            order = Order.place(
                buyer_id=command.buyer_id,
                curator_id=curator_id,
                lines=[
                    {
                        "product_id": line.product_id,
                        "title": products[line.product_id].title,
                        "quantity": line.quantity,
                        "unit_price": products[line.product_id].price,
                        "size": line.size,
                        "color": line.color,
                    }
                    for line in curator_lines
                ],
                shipping_address=dict(shipping_address),
                payment_method=command.payment_method,
                commission_rate=rates[curator_id],
                transaction_code=command.transaction_code,
                payment_proof=command.payment_proof,
            )
            order_repo.add(order)
            reserve_stock(curator_lines, order_id=order.id)
            order_ids.append(str(order.id))

            logger.info(
                "checkout.order_placed",
                order_id=str(order.id),
                buyer_id=str(command.buyer_id),
                curator_id=curator_id,
                total_amount=order.total_amount,
                commission=order.commission,
                status=order.status,
            )

        return order_ids
