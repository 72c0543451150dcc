"""Shared fixtures: in-memory repositories, settings, tokens and app clients."""

import copy
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings, get_settings
from storefront.core.exceptions import EntityNotFoundError, RepositoryError
from storefront.core.security import create_access_token
from storefront.domain.models.cart import CartItem
from storefront.domain.models.catalog import Category, Image, Product, Variation
from storefront.domain.models.delivery import Postcode
from storefront.domain.models.upload import UploadedFile
from storefront.domain.models.user import UserDetails
from storefront.infrastructure.cache.memory_cache import MemoryCache


# =============================================================================
# In-memory repositories
# =============================================================================


class InMemoryCategoryRepository:
    def __init__(self, categories: Optional[List[Category]] = None):
        self.items: Dict[str, Category] = {c.slug: c for c in categories or []}

    def list_all(self) -> List[Category]:
        return sorted(self.items.values(), key=lambda c: c.name)

    def get_by_slug(self, slug: str) -> Optional[Category]:
        return self.items.get(slug)

    def upsert(self, category: Category) -> Category:
        stored = category.model_copy(update={"id": category.id or uuid.uuid4().hex})
        self.items[category.slug] = stored
        return stored


class InMemoryProductRepository:
    def __init__(self, products: Optional[List[Product]] = None):
        self.items: List[Product] = list(products or [])

    def get_by_id(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.items if p.id == product_id), None)

    def get_by_slug(self, slug: str) -> Optional[Product]:
        return next((p for p in self.items if p.slug == slug), None)

    def get(self, id_or_slug: str) -> Optional[Product]:
        return self.get_by_id(id_or_slug) or self.get_by_slug(id_or_slug)

    def list_by_category(self, category_slug: str) -> List[Product]:
        return [p for p in self.items if category_slug in p.category_slugs]

    def create(self, product: Product) -> Product:
        now = datetime.now(timezone.utc)
        stored = product.model_copy(deep=True, update={
            "id": product.id or uuid.uuid4().hex,
            "created_at": product.created_at or now,
            "updated_at": now,
        })
        self.items.append(stored)
        return stored

    def update(self, slug: str, product: Product) -> Product:
        for index, existing in enumerate(self.items):
            if existing.slug == slug:
                stored = product.model_copy(deep=True, update={
                    "id": existing.id,
                    "created_at": existing.created_at,
                    "updated_at": datetime.now(timezone.utc),
                })
                self.items[index] = stored
                return stored
        raise EntityNotFoundError(f"Product not found: {slug}")


class InMemoryCartRepository:
    def __init__(self):
        self.items: Dict[str, CartItem] = {}

    def list_by_user(self, user_id: str) -> List[CartItem]:
        return [i for i in self.items.values() if i.user_id == user_id]

    def get_by_id(self, item_id: str) -> Optional[CartItem]:
        return self.items.get(item_id)

    def find_by_user_and_variation(self, user_id: str, variation_uuid: str) -> Optional[CartItem]:
        return next(
            (i for i in self.items.values() if i.user_id == user_id and i.variation_uuid == variation_uuid),
            None,
        )

    def create(self, item: CartItem) -> CartItem:
        now = datetime.now(timezone.utc)
        stored = item.model_copy(update={"id": uuid.uuid4().hex, "created_at": now, "updated_at": now})
        self.items[stored.id] = stored
        return stored

    def update_quantity(self, item_id: str, quantity: int) -> CartItem:
        if item_id not in self.items:
            raise EntityNotFoundError(f"Cart item not found: {item_id}")
        stored = self.items[item_id].model_copy(update={"quantity": quantity})
        self.items[item_id] = stored
        return stored

    def delete(self, item_id: str) -> bool:
        return self.items.pop(item_id, None) is not None


class InMemoryUserDetailsRepository:
    def __init__(self):
        self.items: Dict[str, UserDetails] = {}

    def get_by_user(self, user_id: str) -> Optional[UserDetails]:
        return self.items.get(user_id)

    def upsert(self, details: UserDetails) -> UserDetails:
        stored = details.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        self.items[details.user_id] = stored
        return stored


class InMemoryUploadRepository:
    def __init__(self):
        self.items: Dict[str, UploadedFile] = {}

    def create(self, uploaded: UploadedFile) -> UploadedFile:
        stored = uploaded.model_copy(update={"id": uploaded.id or uuid.uuid4().hex})
        self.items[stored.id] = stored
        return stored

    def get_by_id(self, file_id: str) -> Optional[UploadedFile]:
        return self.items.get(file_id)


class InMemoryPostcodeRepository:
    def __init__(self, fail: bool = False):
        self.items: Dict[str, Postcode] = {}
        self.fail = fail

    def get(self, postcode: str) -> Optional[Postcode]:
        return self.items.get(postcode)

    def upsert(self, postcode: Postcode) -> bool:
        inserted = postcode.postcode not in self.items
        self.items[postcode.postcode] = postcode
        return inserted

    def update_prices(self, postcode: str, economy_price: float, premium_price: float) -> bool:
        if postcode not in self.items:
            return False
        self.items[postcode] = Postcode(postcode=postcode, economy_price=economy_price, premium_price=premium_price)
        return True

    def search_prefix(self, prefix: str) -> List[Postcode]:
        return sorted((p for code, p in self.items.items() if code.startswith(prefix)), key=lambda p: p.postcode)

    def bulk_upsert(self, postcodes) -> int:
        if self.fail:
            raise RepositoryError("bulk write failed")
        count = 0
        for postcode in postcodes:
            self.items[postcode.postcode] = postcode
            count += 1
        return count


# =============================================================================
# Catalogue data
# =============================================================================


def make_variation(**attrs) -> Variation:
    return Variation.model_validate(attrs)


def make_product(name: str, variations: List[Variation], categories=("paving",), minutes: int = 0, **extra) -> Product:
    slug = name.lower().replace(" ", "-")
    return Product(
        id=f"prod-{slug}",
        name=name,
        slug=slug,
        variations=variations,
        category_slugs=list(categories),
        images=[Image(id="img-1", url=f"/uploads/{slug}.jpg", alternative_text=name)],
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes),
        **extra,
    )


@pytest.fixture
def paving_products() -> List[Product]:
    """Three paving products with variations spread over the filter groups."""
    return [
        make_product(
            "Sandstone",
            [
                make_variation(uuid="v-sand-1", SKU="SAND-1", ColorTone="Beige", Finish="Natural",
                               Thickness="THICKNESS 22MM", Size="SIZE 600X600", PackSize=19.5,
                               Pcs=54, Price=150, Per_m2=25, Stock=10),
                make_variation(uuid="v-sand-2", SKU="SAND-2", ColorTone="Grey", Finish="Honed",
                               Thickness="THICKNESS 22MM", Size="SIZE 600X900", PackSize=1.44,
                               Pcs=4, Price=250, Per_m2=30, Stock=5),
            ],
            minutes=0,
        ),
        make_product(
            "Limestone",
            [
                make_variation(uuid="v-lime-1", SKU="LIME-1", ColorTone="Grey", Finish="Tumbled",
                               Thickness="THICKNESS 20MM", Size="SIZE 600X600", PackSize=19.5,
                               Pcs=54, Price=450, Per_m2=40, Stock=3),
            ],
            minutes=1,
            product_discount=10,
        ),
        make_product(
            "Porcelain",
            [
                make_variation(uuid="v-porc-1", SKU="PORC-1", ColorTone="Black", Finish="r11",
                               Thickness="THICKNESS 20MM", Size="SIZE 600X1200", PackSize=1.44,
                               Pcs=2, Price=1000, Per_m2=55.5, Stock=0),
            ],
            minutes=2,
        ),
    ]


@pytest.fixture
def paving_category() -> Category:
    return Category(
        id="cat-paving",
        name="Paving",
        slug="paving",
        category_discount=0,
        short_description="Outdoor paving",
        images=[Image(id="img-cat", url="/uploads/paving.jpg", alternative_text="Paving")],
    )


# =============================================================================
# Settings, tokens, app
# =============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET_KEY="test-secret",
        MEDIA_ROOT=str(tmp_path / "media"),
        MAX_UPLOAD_SIZE=1024,
        STOREFRONT_API_URL="http://api.test",
    )


@pytest.fixture
def token(settings) -> str:
    return create_access_token("user-1", username="alice", email="alice@example.com", settings=settings)


@pytest.fixture
def other_token(settings) -> str:
    return create_access_token("user-2", username="bob", settings=settings)


@pytest.fixture
def auth_headers(token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def repositories(paving_products, paving_category):
    return {
        "categories": InMemoryCategoryRepository([paving_category]),
        "products": InMemoryProductRepository(copy.deepcopy(paving_products)),
        "cart": InMemoryCartRepository(),
        "user_details": InMemoryUserDetailsRepository(),
        "uploads": InMemoryUploadRepository(),
        "postcodes": InMemoryPostcodeRepository(),
    }


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def client(settings, repositories, cache):
    """TestClient for the storefront API wired to the in-memory repositories."""
    from storefront.api import dependencies
    from storefront.main import app

    app.dependency_overrides = {
        get_settings: lambda: settings,
        dependencies.get_category_repository: lambda: repositories["categories"],
        dependencies.get_product_repository: lambda: repositories["products"],
        dependencies.get_cart_repository: lambda: repositories["cart"],
        dependencies.get_user_details_repository: lambda: repositories["user_details"],
        dependencies.get_upload_repository: lambda: repositories["uploads"],
        dependencies.get_postcode_repository: lambda: repositories["postcodes"],
        dependencies.get_cache: lambda: cache,
    }
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides = {}
