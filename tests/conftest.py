from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import storefront.data.models  # noqa: F401
from storefront.data.database import Base, make_engine, make_session_factory
from storefront.data.models import ProductModel
from storefront.domain.pricing import PricingPolicy
from storefront.main import create_app

PRODUCTS = [
    dict(product_id=1, name="Bamboo Toothbrush", price=Decimal("100.00"), category="bath", image="brush.png"),
    dict(product_id=2, name="Cotton Tote", price=Decimal("50.00"), category="bags", image="tote.png"),
    dict(product_id=3, name="Solar Lamp", price=Decimal("1200.00"), category="home", image="lamp.png"),
    dict(product_id=4, name="Beeswax Wrap", price=Decimal("10.25"), category="kitchen", image=None),
]


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    session.add_all([ProductModel(**p) for p in PRODUCTS])
    session.commit()
    yield session
    session.close()


@pytest.fixture
def policy():
    return PricingPolicy(
        free_shipping_threshold=Decimal("1000"),
        flat_fee=Decimal("40"),
        tax_rate=Decimal("0.02"),
    )


@pytest.fixture
def client(engine, db, policy):
    app = create_app(engine=engine, pricing_policy=policy)
    with TestClient(app) as c:
        yield c
