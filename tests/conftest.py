"""
Retail POS Billing Test Configuration and Fixtures

This module provides:
- Test environment setup
- Application and API client fixtures
- Factories for products, cart lines and offers
"""

import os
from datetime import datetime
from decimal import Decimal
from typing import Generator

import pytest

# Set test environment before the settings object is created
os.environ["ENVIRONMENT"] = "test"
os.environ["BUSINESS_STATE"] = "27"

from fastapi.testclient import TestClient

from retail_pos.core.config import BillingConfig
from retail_pos.models.offer import CartLine, Offer
from retail_pos.models.tax import Jurisdiction, Product
from retail_pos.services.billing_service import BillingService


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app():
    """Create test application instance."""
    from retail_pos.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app) -> Generator:
    """Create synchronous test client."""
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Billing Fixtures
# =============================================================================

@pytest.fixture
def billing_config():
    """Billing configuration for a Maharashtra shop."""
    return BillingConfig(
        currency="INR",
        default_gst_rate=Decimal("18"),
        business_state="27",
        currency_places=2,
    )


@pytest.fixture
def billing(billing_config):
    """Billing service bound to the test configuration."""
    return BillingService(billing_config)


@pytest.fixture
def intra_state():
    return Jurisdiction(supplier_state="27", buyer_state="27")


@pytest.fixture
def inter_state():
    return Jurisdiction(supplier_state="27", buyer_state="29")


@pytest.fixture
def now():
    """A weekday afternoon inside every default validity window."""
    return datetime(2025, 6, 15, 15, 30)


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_product():
    """Factory for products with GST fields."""
    def _make(product_id="P1", price="100", **overrides):
        data = {
            "id": product_id,
            "name": f"Product {product_id}",
            "price": Decimal(price),
        }
        data.update(overrides)
        return Product(**data)
    return _make


@pytest.fixture
def make_line():
    """Factory for priced cart lines."""
    def _make(product_id="P1", quantity=1, unit_price="100", category_id=None):
        return CartLine(
            product_id=product_id,
            quantity=Decimal(str(quantity)),
            unit_price=Decimal(unit_price) if unit_price is not None else None,
            category_id=category_id,
        )
    return _make


@pytest.fixture
def make_offer():
    """Factory for offers in the flat catalog record shape."""
    counter = {"n": 0}

    def _make(offer_type="percentage", **fields):
        counter["n"] += 1
        data = {
            "id": fields.pop("id", f"OFF{counter['n']}"),
            "name": fields.pop("name", f"Offer {counter['n']}"),
            "offer_type": offer_type,
        }
        data.update(fields)
        return Offer(**data)
    return _make
