import pytest

from storefront.core.exceptions import BadRequestError, NotFoundError
from storefront.domain.models.catalog import Product, Variation
from storefront.services.product_service import ProductService, assign_variation_uuids
from tests.conftest import InMemoryProductRepository


def test_assigns_uuid_only_where_missing():
    variations = [Variation(uuid="keep-me"), Variation(), Variation(uuid="")]

    assigned = assign_variation_uuids(variations)

    assert assigned == 2
    assert variations[0].uuid == "keep-me"
    assert variations[1].uuid and variations[2].uuid
    assert variations[1].uuid != variations[2].uuid


def test_create_assigns_uuids():
    service = ProductService(InMemoryProductRepository())
    product = Product(name="Slate", slug="slate", variations=[Variation(SKU="S-1")])

    created = service.create_product(product)

    assert created.id
    assert created.variations[0].uuid


def test_create_rejects_duplicate_slug(paving_products):
    service = ProductService(InMemoryProductRepository(paving_products))
    with pytest.raises(BadRequestError):
        service.create_product(Product(name="Sandstone", slug="sandstone"))


def test_update_preserves_existing_uuids(paving_products):
    service = ProductService(InMemoryProductRepository(paving_products))
    product = Product(
        name="Sandstone",
        slug="sandstone",
        variations=[Variation(uuid="v-sand-1", SKU="SAND-1"), Variation(SKU="SAND-3")],
    )

    updated = service.update_product("sandstone", product)

    assert updated.variations[0].uuid == "v-sand-1"
    assert updated.variations[1].uuid not in (None, "", "v-sand-1")


def test_update_unknown_product():
    service = ProductService(InMemoryProductRepository())
    with pytest.raises(NotFoundError):
        service.update_product("nope", Product(name="Nope", slug="nope"))


def test_get_product_by_slug_or_id(paving_products):
    service = ProductService(InMemoryProductRepository(paving_products))
    assert service.get_product("sandstone").name == "Sandstone"
    assert service.get_product("prod-sandstone").name == "Sandstone"
    with pytest.raises(NotFoundError):
        service.get_product("missing")
