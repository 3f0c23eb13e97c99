import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain

HOODIE = {
    "id": 1,
    "name": "Classic Hoodie",
    "price": 450.0,
    "description": "Heavy cotton hoodie",
    "category": "hoodies",
    "sizes": ["M", "L", "XL"],
    "colors": ["Black", "Grey"],
    "main_image": "https://cdn.example.com/hoodie.jpg",
    "images": ["https://cdn.example.com/hoodie-back.jpg"],
    "color_images": {"Grey": "https://cdn.example.com/hoodie-grey.jpg"},
    "quantity": 10,
    "available": True,
}

CAP = {
    "id": 2,
    "name": "Logo Cap",
    "price": 120.0,
    "description": "Adjustable cap",
    "category": "sets",
    "sizes": ["One Size"],
    "colors": ["Multi"],
    "main_image": None,
    "images": ["https://cdn.example.com/cap.jpg"],
    "color_images": None,
    "quantity": 5,
    "available": True,
}

SOLD_OUT_JACKET = {
    "id": 3,
    "name": "Rain Jacket",
    "price": 900.0,
    "description": "Waterproof shell",
    "category": "jackets",
    "sizes": ["L"],
    "colors": ["Navy"],
    "main_image": "https://cdn.example.com/jacket.jpg",
    "images": [],
    "color_images": {},
    "quantity": 0,
    "available": True,
}

SIZED_SWEATPANTS = {
    "id": 4,
    "name": "Jogger Sweatpants",
    "price": 300.0,
    "description": "Tapered fit",
    "category": "sweatpants",
    "sizes": ["S", "M"],
    "colors": ["Multi"],
    "main_image": "https://cdn.example.com/joggers.jpg",
    "images": [],
    "color_images": {},
    "quantity": 3,
    "available": True,
}

CATEGORIES = [
    {"id": "hoodies", "name": "Hoodies"},
    {"id": "sweatpants", "name": "Sweatpants"},
    {"id": "sets", "name": "Sets"},
    {"id": "jackets", "name": "Jackets"},
    {"id": "tees", "name": "Tees"},
]


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        # Clear persisted state between tests
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _reset_api():
    from storefront.remote import reset_api

    yield
    reset_api()


@pytest.fixture()
def product_records():
    return [dict(HOODIE), dict(CAP), dict(SOLD_OUT_JACKET), dict(SIZED_SWEATPANTS)]


@pytest.fixture()
def fake_api(product_records):
    from storefront.remote.fake_adapter import FakeStorefrontAPI

    return FakeStorefrontAPI(products=product_records, categories=CATEGORIES)


@pytest.fixture()
def store():
    from storefront.persistence.state import LocalStore

    return LocalStore()


@pytest.fixture()
def shop(fake_api, store):
    """A storefront with the catalogue already loaded."""
    from storefront.shop import Storefront

    shop = Storefront(api=fake_api, store=store)
    shop.load()
    return shop


@pytest.fixture()
def hoodie():
    from storefront.catalogue.product import Product

    return Product.model_validate(HOODIE)


@pytest.fixture()
def cap():
    from storefront.catalogue.product import Product

    return Product.model_validate(CAP)


@pytest.fixture()
def sold_out_jacket():
    from storefront.catalogue.product import Product

    return Product.model_validate(SOLD_OUT_JACKET)


@pytest.fixture()
def session():
    from storefront.session.session import ShopperSession

    session = ShopperSession.create()
    return session
