"""Application tests for curator registration and catalogue management."""

import pytest
from marketplace.catalogue.details import SetProductActive, UpdateProductDetails
from marketplace.catalogue.inventory import AddVariant, RemoveVariant, SetVariantStock
from marketplace.catalogue.product import Product
from marketplace.catalogue.queries import product_variants
from marketplace.catalogue.variant import ProductVariant
from marketplace.curator.curator import Curator
from marketplace.shared.errors import ForbiddenError, NotFoundError
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


class TestRegisterCurator:
    def test_registers(self, register_curator):
        curator_id = register_curator()
        curator = current_domain.repository_for(Curator).get(curator_id)
        assert curator.slug == "alpaca-threads"
        assert curator.user_id == "curator-user-1"
        assert curator.is_active is True

    def test_one_profile_per_user(self, register_curator):
        register_curator()
        with pytest.raises(ValidationError) as exc:
            register_curator(slug="second-store")
        assert "user_id" in exc.value.messages

    def test_slug_is_unique(self, register_curator):
        register_curator()
        with pytest.raises(ValidationError) as exc:
            register_curator(user_id="curator-user-2")
        assert "slug" in exc.value.messages

    def test_slug_must_be_url_safe(self, register_curator):
        with pytest.raises(ValidationError):
            register_curator(slug="Alpaca Threads!")


class TestCreateProduct:
    def test_creates_variants_from_sizes_and_colors(self, register_curator, create_product):
        register_curator()
        product_id = create_product(sizes="S,M,L", colors="Red,Grey", stock_quantity=10)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.stock_quantity == 10

        variants = current_domain.repository_for(ProductVariant).for_product(product_id)
        assert len(variants) == 6
        assert sum(v.stock_quantity for v in variants) == 10
        assert sorted(v.stock_quantity for v in variants) == [1, 1, 2, 2, 2, 2]

    def test_requires_curator_profile(self, create_product):
        with pytest.raises(NotFoundError):
            create_product(user_id="not-a-curator")


class TestProductManagement:
    @pytest.fixture()
    def product_id(self, register_curator, create_product):
        register_curator()
        register_curator(user_id="curator-user-2", store_name="Other", slug="other")
        return create_product()

    def test_owner_updates_details(self, product_id):
        current_domain.process(
            UpdateProductDetails(product_id=product_id, user_id="curator-user-1", title="Baby Alpaca", tags="soft, warm"),
            asynchronous=False,
        )
        product = current_domain.repository_for(Product).get(product_id)
        assert product.title == "Baby Alpaca"
        assert product.tags == "soft,warm"
        assert product.price == 5000

    def test_other_curator_cannot_update(self, product_id):
        with pytest.raises(ForbiddenError):
            current_domain.process(
                UpdateProductDetails(product_id=product_id, user_id="curator-user-2", title="Mine now"),
                asynchronous=False,
            )

    def test_soft_disable(self, product_id):
        current_domain.process(
            SetProductActive(product_id=product_id, user_id="curator-user-1", is_active=False),
            asynchronous=False,
        )
        assert current_domain.repository_for(Product).get(product_id).is_active is False


class TestInventory:
    @pytest.fixture()
    def product_id(self, register_curator, create_product):
        register_curator()
        return create_product(sizes="M", colors="Red", stock_quantity=5)

    def test_add_variant(self, product_id, variant_stock):
        variant_id = current_domain.process(
            AddVariant(product_id=product_id, user_id="curator-user-1", size="XL", color="Red", stock_quantity=4),
            asynchronous=False,
        )
        assert current_domain.repository_for(ProductVariant).get(variant_id).size == "XL"
        assert variant_stock(product_id, "XL", "Red") == 4

    def test_duplicate_variant_is_rejected(self, product_id):
        with pytest.raises(ValidationError):
            current_domain.process(
                AddVariant(product_id=product_id, user_id="curator-user-1", size="M", color="Red"),
                asynchronous=False,
            )

    def test_set_stock(self, product_id, variant_stock):
        variant = current_domain.repository_for(ProductVariant).get_combination(product_id, "M", "Red")
        current_domain.process(
            SetVariantStock(variant_id=variant.id, user_id="curator-user-1", stock_quantity=12, sku="SW-M-RED"),
            asynchronous=False,
        )
        assert variant_stock(product_id) == 12

    def test_set_negative_stock(self, product_id, variant_stock):
        variant = current_domain.repository_for(ProductVariant).get_combination(product_id, "M", "Red")
        with pytest.raises(ValidationError):
            current_domain.process(
                SetVariantStock(variant_id=variant.id, user_id="curator-user-1", stock_quantity=-3),
                asynchronous=False,
            )
        assert variant_stock(product_id) == 5

    def test_non_curator_cannot_manage_inventory(self, product_id):
        variant = current_domain.repository_for(ProductVariant).get_combination(product_id, "M", "Red")
        with pytest.raises(ForbiddenError):
            current_domain.process(
                SetVariantStock(variant_id=variant.id, user_id="buyer-1", stock_quantity=1),
                asynchronous=False,
            )

    def test_remove_variant(self, product_id):
        variant = current_domain.repository_for(ProductVariant).get_combination(product_id, "M", "Red")
        current_domain.process(RemoveVariant(variant_id=variant.id, user_id="curator-user-1"), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(ProductVariant).get(variant.id)


class TestProductVariantsQuery:
    def test_variant_map(self, register_curator, create_product):
        register_curator()
        product_id = create_product(sizes="S,M", colors="Red", stock_quantity=1)

        result = product_variants(product_id)

        assert [v.size for v in result["variants"]] == ["M", "S"]
        assert result["variant_map"]["S"]["Red"]["stock_quantity"] == 1
        assert result["variant_map"]["S"]["Red"]["available"] is True
        assert result["variant_map"]["M"]["Red"]["available"] is False

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            product_variants("missing")
