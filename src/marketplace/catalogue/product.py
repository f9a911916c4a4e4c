"""Product aggregate — a curator's catalogue entry.

Size and color lists are kept as comma-delimited strings (legacy shape); the
purchasable configurations live in ``ProductVariant`` records generated from
their cross product. ``stock_quantity`` is the legacy product-level count used
for lines that carry no size/color selection.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from marketplace.catalogue.events import (
    ProductActivationChanged,
    ProductCreated,
    ProductDetailsUpdated,
)
from marketplace.domain import marketplace
from marketplace.shared.errors import ForbiddenError, InsufficientStockError


def split_list(value) -> list[str]:
    """Parse a comma-delimited list, dropping blanks and duplicates."""
    if not value:
        return []
    items = []
    for part in value.split(","):
        part = part.strip()
        if part and part not in items:
            items.append(part)
    return items


def distribute_stock(total: int, count: int) -> list[int]:
    """Spread ``total`` units over ``count`` variants as evenly as possible.

    The remainder goes to the first variants, so the parts always sum to
    ``total``.
    """
    if count <= 0:
        return []
    base, remainder = divmod(total, count)
    return [base + 1 if index < remainder else base for index in range(count)]


@marketplace.aggregate
class Product:
    curator_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    description = Text()
    price = Integer(required=True, min_value=0)  # minor units
    category = String(max_length=100)
    tags = String(max_length=500)
    sizes = String(max_length=255)
    colors = String(max_length=255)
    stock_quantity = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        curator_id,
        title,
        price,
        description=None,
        category=None,
        tags=None,
        sizes=None,
        colors=None,
        stock_quantity=0,
    ):
        now = datetime.now(UTC)
        product = cls(
            curator_id=curator_id,
            title=title,
            description=description,
            price=price,
            category=category,
            tags=",".join(split_list(tags)) or None,
            sizes=",".join(split_list(sizes)) or None,
            colors=",".join(split_list(colors)) or None,
            stock_quantity=stock_quantity,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                curator_id=str(curator_id),
                title=title,
                price=price,
                stock_quantity=stock_quantity,
                created_at=now,
            )
        )
        return product

    @property
    def size_list(self) -> list[str]:
        return split_list(self.sizes)

    @property
    def color_list(self) -> list[str]:
        return split_list(self.colors)

    def variant_combinations(self) -> list[tuple[str, str, int]]:
        """(size, color, initial stock) for every size × color pair."""
        pairs = [(size, color) for size in self.size_list for color in self.color_list]
        shares = distribute_stock(self.stock_quantity or 0, len(pairs))
        return [(size, color, share) for (size, color), share in zip(pairs, shares, strict=True)]

    def assert_owned_by(self, curator_id):
        if str(self.curator_id) != str(curator_id):
            raise ForbiddenError("You can only manage your own products")

    def update_details(self, title=None, description=None, price=None, category=None, tags=None):
        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if price is not None:
            self.price = price
        if category is not None:
            self.category = category
        if tags is not None:
            self.tags = ",".join(split_list(tags)) or None
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                title=self.title,
                price=self.price,
                updated_at=self.updated_at,
            )
        )

    def set_active(self, is_active: bool):
        if bool(self.is_active) == bool(is_active):
            return
        self.is_active = bool(is_active)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductActivationChanged(
                product_id=str(self.id),
                is_active=self.is_active,
                changed_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Legacy product-level stock (lines without a size/color selection)
    # -------------------------------------------------------------------
    def reserve_stock(self, quantity: int):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        available = self.stock_quantity or 0
        if available < quantity:
            raise InsufficientStockError(f"product '{self.title}'", available, quantity)
        self.stock_quantity = available - quantity
        self.updated_at = datetime.now(UTC)

    def restore_stock(self, quantity: int):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        self.stock_quantity = (self.stock_quantity or 0) + quantity
        self.updated_at = datetime.now(UTC)
