"""
Unit Tests for the Billing Service

End-to-end cart quotes: line taxes, offers, rounding.
"""

import logging

import pytest
from decimal import Decimal

from retail_pos.core.config import BillingConfig, Settings
from retail_pos.core.exceptions import InvalidStateError, ProductNotFoundError
from retail_pos.core.logging_config import get_logger
from retail_pos.core.states import StateCode
from retail_pos.models.offer import CartLine, CustomerLoyalty, OfferUsage
from retail_pos.models.tax import TaxCalculationMethod
from retail_pos.services import billing_service as billing_module
from retail_pos.services.billing_service import BillingService


class TestBillingConfig:
    """Tests for configuration threading"""

    @pytest.mark.unit
    def test_from_settings(self):
        source = Settings(BASE_CURRENCY="INR", DEFAULT_GST_RATE=Decimal("12"), BUSINESS_STATE="29")
        config = BillingConfig.from_settings(source)
        assert config.default_gst_rate == Decimal("12")
        assert config.business_state == "29"
        assert config.currency_places == 2

    @pytest.mark.unit
    def test_default_rate_used_for_unmapped_products(self, make_product, make_line):
        service = BillingService(BillingConfig(default_gst_rate=Decimal("12")))
        bill = service.quote([make_line()], [make_product()])
        assert bill.lines[0].gst_rate == Decimal("12")
        assert bill.tax_summary.tax_total == Decimal("12.00")

    @pytest.mark.unit
    def test_jurisdiction_defaults_to_business_state(self, billing):
        jurisdiction = billing.jurisdiction_for(buyer_state="Karnataka")
        assert jurisdiction.supplier_state == StateCode.MAHARASHTRA
        assert jurisdiction.buyer_state == StateCode.KARNATAKA
        assert jurisdiction.is_inter_state is True

    @pytest.mark.unit
    def test_unknown_state_rejected(self, billing):
        with pytest.raises(InvalidStateError):
            billing.jurisdiction_for(buyer_state="Atlantis")


class TestQuote:
    """Tests for complete cart quotes"""

    @pytest.mark.unit
    def test_quote_without_offers(self, billing, make_product, make_line):
        products = [
            make_product("SOAP", price="100", gst_rate=Decimal("18")),
            make_product("TEA", price="250", hsn_code="0902"),
        ]
        lines = [CartLine(product_id="SOAP", quantity=2), CartLine(product_id="TEA", quantity=1)]

        bill = billing.quote(lines, products)

        assert bill.currency == "INR"
        assert bill.cart_total == Decimal("450.00")
        assert bill.tax_summary.cgst_total == Decimal("24.25")
        assert bill.tax_summary.sgst_total == Decimal("24.25")
        assert bill.tax_summary.grand_total == Decimal("498.50")
        assert bill.total_discount == Decimal("0.00")
        assert bill.payable_total == Decimal("498.50")
        assert bill.is_inter_state is False
        assert [line.gst_rate for line in bill.lines] == [Decimal("18"), Decimal("5")]

    @pytest.mark.unit
    def test_products_as_mapping(self, billing, make_product):
        product = make_product("SOAP", gst_rate=Decimal("18"))
        bill = billing.quote([CartLine(product_id="SOAP", quantity=1)], {"SOAP": product})
        assert bill.payable_total == Decimal("118.00")

    @pytest.mark.unit
    def test_unknown_product_raises(self, billing, make_product):
        with pytest.raises(ProductNotFoundError) as exc_info:
            billing.quote([CartLine(product_id="GHOST", quantity=1)], [make_product("SOAP")])
        assert exc_info.value.status_code == 404
        assert exc_info.value.details["identifier"] == "GHOST"

    @pytest.mark.unit
    def test_inter_state_quote(self, billing, make_product):
        product = make_product("LAPTOP", price="50000", hsn_code="8471")
        jurisdiction = billing.jurisdiction_for(buyer_state="29")
        bill = billing.quote([CartLine(product_id="LAPTOP", quantity=1)], [product], jurisdiction=jurisdiction)
        assert bill.is_inter_state is True
        assert bill.tax_summary.igst_total == Decimal("9000.00")
        assert bill.tax_summary.cgst_total == Decimal("0.00")
        assert bill.lines[0].tax.igst == Decimal("9000.00")

    @pytest.mark.unit
    def test_inclusive_price_rounded_for_display(self, billing, make_product):
        product = make_product(
            "JUICE",
            price="99.99",
            gst_rate=Decimal("18"),
            tax_calculation_method=TaxCalculationMethod.INCLUSIVE,
        )
        bill = billing.quote([CartLine(product_id="JUICE", quantity=3)], [product])
        line = bill.lines[0]
        assert line.line_amount == Decimal("299.97")
        assert line.taxable_amount == Decimal("254.21")
        assert line.tax.total == Decimal("45.76")
        assert line.total_amount == Decimal("299.97")
        assert bill.payable_total == Decimal("299.97")

    @pytest.mark.regression
    def test_quote_with_stacked_offers(self, billing, make_product, make_offer, now):
        """Buy-2-get-1 and a capped percentage stack under the cart total"""
        product = make_product("TEA", price="100", hsn_code="0902")
        offers = [
            make_offer("buy_x_get_y", id="BOGO", buy_quantity=2, get_quantity=1, priority=1),
            make_offer(
                "percentage",
                id="PCT",
                discount_value=15,
                max_discount_amount=50,
                min_purchase_amount=400,
                priority=2,
            ),
            make_offer("flat_amount", id="BIG", discount_value=1000, priority=3),
        ]

        bill = billing.quote(
            [CartLine(product_id="TEA", quantity=5)], [product], offers=offers, now=now
        )

        assert bill.cart_total == Decimal("500.00")
        assert [offer.offer_id for offer in bill.applied_offers] == ["BOGO", "PCT"]
        assert bill.total_discount == Decimal("250.00")
        assert bill.tax_summary.grand_total == Decimal("525.00")
        assert bill.payable_total == Decimal("275.00")

    @pytest.mark.unit
    def test_offers_use_line_category(self, billing, make_product, make_offer, now):
        product = make_product("MILK", price="60", gst_rate=Decimal("0"), category_id="DAIRY")
        offers = [make_offer("category_based", discount_value=10, applicable_categories="DAIRY")]
        bill = billing.quote([CartLine(product_id="MILK", quantity=5)], [product], offers=offers, now=now)
        assert bill.total_discount == Decimal("30.00")
        assert bill.payable_total == Decimal("270.00")

    @pytest.mark.unit
    def test_loyalty_and_usage_passed_through(self, billing, make_product, make_offer, now):
        product = make_product("SOAP", price="200", gst_rate=Decimal("18"))
        offers = [
            make_offer("loyalty_points", id="LOY", discount_value=25, points_threshold=500),
            make_offer("flat_amount", id="ONCE", discount_value=10, per_customer_limit=1),
        ]
        loyalty = CustomerLoyalty(customer_id="C9", available_points=800)
        usage = {"ONCE": OfferUsage(customer_redemptions=1)}

        bill = billing.quote(
            [CartLine(product_id="SOAP", quantity=1)],
            [product],
            offers=offers,
            customer_loyalty=loyalty,
            now=now,
            usage=usage,
        )

        assert [offer.offer_id for offer in bill.applied_offers] == ["LOY"]
        assert bill.payable_total == Decimal("211.00")

    @pytest.mark.unit
    def test_quote_is_logged(self, billing, make_product, caplog):
        product = make_product("SOAP", gst_rate=Decimal("18"))
        with caplog.at_level(logging.INFO, logger="retail_pos.services.billing_service"):
            billing.quote([CartLine(product_id="SOAP", quantity=1)], [product])
        record = next(r for r in caplog.records if r.message == "Cart quoted")
        assert record.line_count == 1
        assert record.payable_total == "118.00"

    @pytest.mark.unit
    def test_module_logger_is_shared(self):
        assert billing_module.logger is get_logger("retail_pos.services.billing_service")

    @pytest.mark.unit
    def test_offer_threshold_follows_currency_places(self, make_product, make_offer, now):
        """A 0.004 discount is nothing in paise but counts at three places"""
        product = make_product("CANDY", price="4", gst_rate=Decimal("0"))
        offers = [make_offer("percentage", id="TINY", discount_value="0.1")]
        lines = [CartLine(product_id="CANDY", quantity=1)]

        two_places = BillingService(BillingConfig(currency_places=2))
        assert two_places.quote(lines, [product], offers=offers, now=now).applied_offers == []

        three_places = BillingService(BillingConfig(currency_places=3))
        bill = three_places.quote(lines, [product], offers=offers, now=now)
        assert [offer.offer_id for offer in bill.applied_offers] == ["TINY"]
        assert bill.total_discount == Decimal("0.004")
