import json
import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path or "/bdd/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


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


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Clean up stores and the mailer after every test."""
    yield

    from protean import current_domain
    from storefront.notification import reset_mailer

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_mailer()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
SHIPPING_ADDRESS = {
    "street": "12 Market Street",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "US",
}


def offering_row(product_type="SIMPLE", price=100.0, stock=5, sale_price=None, **extra):
    row = {"regular_price": price, "stock": stock, **extra}
    if sale_price is not None:
        row["sale_price"] = sale_price
    if product_type in ("VARIABLE", "GROUP"):
        row.setdefault("name", "Default")
    if product_type == "EXTERNAL":
        row.setdefault("link", "https://partner.example.com/item")
    return row


@pytest.fixture()
def make_product():
    """Create a product through the CreateProduct command and return its id."""
    from protean import current_domain
    from storefront.catalogue.management import CreateProduct

    def _make(name="Desk Lamp", product_type="SIMPLE", price=100.0, stock=5, sale_price=None, status=None, offerings=None):
        if offerings is None:
            offerings = [offering_row(product_type, price=price, stock=stock, sale_price=sale_price)]
        return current_domain.process(
            CreateProduct(
                name=name,
                product_type=product_type,
                offerings=json.dumps(offerings),
                status=status,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def add_to_cart():
    from protean import current_domain
    from storefront.cart.items import AddToCart

    def _add(product_id, quantity=1, customer_id="cust-001"):
        return current_domain.process(
            AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def place_order():
    from protean import current_domain
    from storefront.order.placement import PlaceOrder

    def _place(customer_id="cust-001", customer_email=None, **overrides):
        fields = {
            "customer_id": customer_id,
            "customer_email": customer_email,
            "shipping_address": json.dumps(SHIPPING_ADDRESS),
        }
        fields.update(overrides)
        return current_domain.process(PlaceOrder(**fields), asynchronous=False)

    return _place
