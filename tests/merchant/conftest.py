import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain


@pytest.fixture(scope="session")
def merchant_bed():
    from merchant.domain import merchant

    bed = DomainFixture(merchant)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(merchant_bed):
    with merchant_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def order_items():
    return [
        {"name": "Classic Hoodie", "price": 450.0, "size": "L", "color": "Grey"},
        {"name": "Logo Cap", "price": 120.0, "size": "One Size", "color": "Multi"},
    ]
