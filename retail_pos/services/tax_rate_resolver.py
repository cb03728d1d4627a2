"""
HSN / Tax Rate Resolver

Maps HSN codes to GST rates and decomposes a rate into CGST/SGST
(intra-state) or IGST (inter-state). Pure functions; callers validate rates
before calling.
"""

from decimal import Decimal
from typing import Optional

from retail_pos.core.gst_config import get_default_gst_rate, get_hsn_entry
from retail_pos.core.money import ZERO
from retail_pos.core.states import StateCode
from retail_pos.models.tax import Jurisdiction, Product, RateSplit, TaxSelectionMode


def lookup_rate(hsn_code: Optional[str], default_rate: Optional[Decimal] = None) -> Decimal:
    """
    Suggested GST rate for an HSN code.

    Unknown or missing codes return the default rate (18% unless the caller
    passes its own) so billing is never blocked by an unmapped product.

    Args:
        hsn_code: HSN code
        default_rate: Rate to use when the code is not in the table

    Returns:
        GST rate as Decimal
    """
    entry = get_hsn_entry(hsn_code)
    if entry is not None:
        return entry.rate
    if default_rate is not None:
        return default_rate
    return get_default_gst_rate().value


def lookup_cess(hsn_code: Optional[str]) -> Decimal:
    """Cess listed for an HSN code, zero when unlisted."""
    entry = get_hsn_entry(hsn_code)
    return entry.cess_rate if entry is not None else ZERO


def split_rate(
    rate: Decimal,
    supplier_state: Optional[StateCode] = None,
    buyer_state: Optional[StateCode] = None,
    cess_rate: Decimal = ZERO,
) -> RateSplit:
    """
    Split a GST rate for the transaction's jurisdiction.

    Intra-state: rate split evenly into CGST and SGST.
    Inter-state: full rate as IGST.
    A missing state on either side is treated as intra-state.
    Cess is carried separately and never split.

    Args:
        rate: Total GST rate (e.g., 18)
        supplier_state: Seller state
        buyer_state: Buyer state
        cess_rate: Cess rate, additive to GST

    Returns:
        RateSplit with cgst, sgst, igst, cess, is_inter_state
    """
    is_inter_state = Jurisdiction(
        supplier_state=supplier_state, buyer_state=buyer_state
    ).is_inter_state

    if is_inter_state:
        return RateSplit(igst=rate, cess=cess_rate, is_inter_state=True)

    half_rate = rate / 2
    return RateSplit(cgst=half_rate, sgst=half_rate, cess=cess_rate, is_inter_state=False)


def resolve_product_rate(product: Product, default_rate: Optional[Decimal] = None) -> Decimal:
    """
    Total GST rate for a product.

    Priority order:
    1. Product-level GST rate
    2. HSN code lookup
    3. Default rate
    """
    if product.gst_rate is not None:
        return product.gst_rate
    return lookup_rate(product.hsn_code, default_rate)


def resolve_product_split(
    product: Product,
    jurisdiction: Jurisdiction,
    default_rate: Optional[Decimal] = None,
) -> RateSplit:
    """
    Component rates for a product in a jurisdiction.

    Manual products keep the CGST/SGST/IGST rates entered for them; auto
    products, and manual products missing the component needed, are split
    from their total rate.
    """
    cess_rate = product.cess_rate
    if not cess_rate and product.gst_rate is None:
        cess_rate = lookup_cess(product.hsn_code)

    if product.tax_selection_mode == TaxSelectionMode.MANUAL:
        if jurisdiction.is_inter_state and product.igst_rate is not None:
            return RateSplit(igst=product.igst_rate, cess=cess_rate, is_inter_state=True)
        if (
            not jurisdiction.is_inter_state
            and product.cgst_rate is not None
            and product.sgst_rate is not None
        ):
            return RateSplit(
                cgst=product.cgst_rate,
                sgst=product.sgst_rate,
                cess=cess_rate,
                is_inter_state=False,
            )

    return split_rate(
        resolve_product_rate(product, default_rate),
        jurisdiction.supplier_state,
        jurisdiction.buyer_state,
        cess_rate,
    )
