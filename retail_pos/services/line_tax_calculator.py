"""
Line Tax Calculator

Computes base amount and tax for sale/purchase lines and aggregates them per
sale. All arithmetic stays in unrounded Decimal; rounding to currency is
left to whoever displays or persists the result.
"""

from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from retail_pos.core.money import HUNDRED, ZERO
from retail_pos.models.offer import CartLine
from retail_pos.models.tax import (
    GSTBreakdown,
    Jurisdiction,
    LineTax,
    Product,
    RateSplit,
    RateWiseSummary,
    SaleLine,
    SaleTaxSummary,
    TaxCalculationMethod,
)
from retail_pos.services.tax_rate_resolver import resolve_product_split


def compute_line(
    amount: Decimal,
    rate: Decimal,
    mode: TaxCalculationMethod = TaxCalculationMethod.EXCLUSIVE,
) -> LineTax:
    """
    Tax for one amount at one rate.

    exclusive: tax = amount * rate / 100, total = amount + tax
    inclusive: tax = amount * rate / (100 + rate), base = amount - tax,
               total = amount

    A zero rate gives zero tax. Negative amounts (returns, credit notes)
    keep their sign throughout.

    Args:
        amount: Line amount
        rate: Tax rate in percent, validated to [0, 100] upstream
        mode: Whether amount already includes tax

    Returns:
        LineTax with base_amount, tax_amount, total
    """
    mode = TaxCalculationMethod(mode)

    if mode == TaxCalculationMethod.INCLUSIVE:
        tax_amount = amount * rate / (HUNDRED + rate)
        return LineTax(base_amount=amount - tax_amount, tax_amount=tax_amount, total=amount)

    tax_amount = amount * rate / HUNDRED
    return LineTax(base_amount=amount, tax_amount=tax_amount, total=amount + tax_amount)


def compute_breakdown(
    amount: Decimal,
    rates: RateSplit,
    mode: TaxCalculationMethod = TaxCalculationMethod.EXCLUSIVE,
) -> Tuple[LineTax, GSTBreakdown]:
    """
    Tax for one amount across GST components and cess.

    The taxable base comes from compute_line on the combined rate; each
    component is then taken on that base.

    Returns:
        (LineTax, GSTBreakdown) where LineTax.tax_amount equals
        GSTBreakdown.total
    """
    base_amount = compute_line(amount, rates.total_rate, mode).base_amount

    cgst = base_amount * rates.cgst / HUNDRED
    sgst = base_amount * rates.sgst / HUNDRED
    igst = base_amount * rates.igst / HUNDRED
    cess = base_amount * rates.cess / HUNDRED
    total_tax = cgst + sgst + igst + cess

    # Keep base + tax == amount for inclusive prices
    if TaxCalculationMethod(mode) == TaxCalculationMethod.INCLUSIVE:
        line = LineTax(base_amount=amount - total_tax, tax_amount=total_tax, total=amount)
    else:
        line = LineTax(base_amount=amount, tax_amount=total_tax, total=amount + total_tax)

    breakdown = GSTBreakdown(
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        cess=cess,
        total=total_tax,
        is_inter_state=rates.is_inter_state,
    )
    return line, breakdown


def compute_sale_line(
    cart_line: CartLine,
    product: Product,
    jurisdiction: Jurisdiction,
    default_rate: Optional[Decimal] = None,
) -> SaleLine:
    """
    Price and tax one cart line.

    Args:
        cart_line: Cart line; its unit price wins over the product price
        product: Catalog product for the line
        jurisdiction: Supplier/buyer states of the sale
        default_rate: Rate for products with neither GST rate nor known HSN

    Returns:
        Immutable SaleLine
    """
    unit_price = cart_line.unit_price if cart_line.unit_price is not None else product.price
    line_amount = cart_line.quantity * unit_price

    rates = resolve_product_split(product, jurisdiction, default_rate)
    line, breakdown = compute_breakdown(line_amount, rates, product.tax_calculation_method)

    return SaleLine(
        product_id=product.id,
        product_name=product.name,
        quantity=cart_line.quantity,
        unit_price=unit_price,
        line_amount=line_amount,
        hsn_code=product.hsn_code,
        category_id=cart_line.category_id or product.category_id,
        tax_calculation_method=product.tax_calculation_method,
        rates=rates,
        base_amount=line.base_amount,
        tax=breakdown,
        total_amount=line.total,
    )


def summarize_sale(
    lines: Iterable[SaleLine],
    jurisdiction: Optional[Jurisdiction] = None,
) -> SaleTaxSummary:
    """
    Aggregate line taxes for a sale, overall and per GST rate.

    Returns:
        SaleTaxSummary with rate-wise rows sorted by rate
    """
    jurisdiction = jurisdiction or Jurisdiction()
    lines = list(lines)
    rate_wise_data: Dict[Decimal, RateWiseSummary] = {}

    for line in lines:
        rate = line.rates.gst_rate
        row = rate_wise_data.setdefault(rate, RateWiseSummary(gst_rate=rate))
        row.taxable_amount += line.base_amount
        row.cgst_amount += line.tax.cgst
        row.sgst_amount += line.tax.sgst
        row.igst_amount += line.tax.igst
        row.cess_amount += line.tax.cess
        row.total_tax += line.tax.total

    taxable_total = sum((line.base_amount for line in lines), ZERO)
    tax_total = sum((line.tax.total for line in lines), ZERO)

    return SaleTaxSummary(
        taxable_total=taxable_total,
        cgst_total=sum((line.tax.cgst for line in lines), ZERO),
        sgst_total=sum((line.tax.sgst for line in lines), ZERO),
        igst_total=sum((line.tax.igst for line in lines), ZERO),
        cess_total=sum((line.tax.cess for line in lines), ZERO),
        tax_total=tax_total,
        grand_total=taxable_total + tax_total,
        is_inter_state=jurisdiction.is_inter_state,
        supply_state=jurisdiction.supplier_state,
        billing_state=jurisdiction.buyer_state,
        rate_wise_summary=[rate_wise_data[rate] for rate in sorted(rate_wise_data)],
    )
