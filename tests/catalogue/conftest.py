import pytest
from protean.integrations.pytest import DomainFixture

from catalogue.mirror import CatalogMirror
from catalogue.source.fake_adapter import InMemoryCatalogSource


@pytest.fixture(scope="session")
def catalogue_bed():
    from catalogue.domain import catalogue

    bed = DomainFixture(catalogue)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(catalogue_bed):
    with catalogue_bed.domain_context():
        yield


@pytest.fixture()
def source():
    return InMemoryCatalogSource()


@pytest.fixture()
def mirror(source):
    mirror = CatalogMirror(source, collection="menuItems")
    yield mirror
    mirror.close()


@pytest.fixture()
def make_record():
    """Factory for raw menu records as the source stores them."""

    def _make(name="Margherita", price=12.5, **overrides):
        record = {
            "name": name,
            "description": f"{name} description",
            "price": price,
            "imageUrl": f"https://images.example.com/{name.lower()}.jpg",
            "category": "Pizza",
            "available": True,
        }
        record.update(overrides)
        return record

    return _make
