from decimal import Decimal

import pytest
from protean.integrations.pytest import DomainFixture

from catalogue.item.item import CatalogItem
from catalogue.mirror import CatalogMirror
from catalogue.source.fake_adapter import InMemoryCatalogSource
from ordering.checkout.fake_adapter import InMemoryOrderSink
from ordering.checkout.placement import CustomerInfo, OrderPlacement


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def make_item():
    """Factory for catalog item snapshots."""

    def _make(item_id="pizza", price="10.00", name=None, available=True):
        return CatalogItem(
            item_id=item_id,
            name=name or item_id.capitalize(),
            description=f"{item_id} description",
            unit_price=Decimal(price),
            image_ref=f"https://images.example.com/{item_id}.jpg",
            available=available,
        )

    return _make


@pytest.fixture()
def source():
    return InMemoryCatalogSource()


@pytest.fixture()
def mirror(source):
    mirror = CatalogMirror(source, collection="menuItems")
    yield mirror
    mirror.close()


@pytest.fixture()
def sink():
    return InMemoryOrderSink()


@pytest.fixture()
def placement(sink):
    return OrderPlacement(sink)


@pytest.fixture()
def customer():
    return CustomerInfo(name="Jane Doe", phone="+1 (555) 123-4567", address="123 Main St, Springfield")
