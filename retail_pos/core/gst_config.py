"""
GST Configuration for Retail POS Billing
India GST rate slabs and the static HSN to rate table

The table is seeded with the HSN codes the shop configures out of the box
plus common kirana store codes. Codes not listed fall back to the default
rate (18%) so that an unmapped product never blocks billing.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from retail_pos.core.validation import clean_hsn_code


class GSTRate(Enum):
    """GST rate slabs in India"""
    ZERO = Decimal("0")
    FIVE = Decimal("5")
    TWELVE = Decimal("12")
    EIGHTEEN = Decimal("18")
    TWENTY_EIGHT = Decimal("28")
    FORTY = Decimal("40")


@dataclass(frozen=True)
class HSNEntry:
    """HSN code with its GST slab and cess"""
    hsn_code: str
    description: str
    gst_rate: GSTRate
    cess_rate: Decimal = Decimal("0")

    @property
    def rate(self) -> Decimal:
        return self.gst_rate.value


def _entries(rate: GSTRate, rows) -> List[HSNEntry]:
    return [HSNEntry(code, description, rate, Decimal(cess)) for code, description, cess in rows]


# ============================================================================
# HSN RATE TABLE
# ============================================================================

_NIL_RATED = _entries(GSTRate.ZERO, [
    ("0401", "Milk and cream", "0"),
    ("0407", "Birds' eggs, in shell, fresh", "0"),
    ("0701", "Potatoes, fresh or chilled", "0"),
    ("0702", "Tomatoes, fresh or chilled", "0"),
    ("0703", "Onions, shallots, garlic", "0"),
    ("0803", "Bananas, fresh or dried", "0"),
    ("0808", "Apples, pears and quinces, fresh", "0"),
    ("1001", "Wheat and meslin", "0"),
    ("1006", "Rice", "0"),
    ("1701", "Cane or beet sugar", "0"),
])

_FIVE_PERCENT = _entries(GSTRate.FIVE, [
    ("0402", "Milk, concentrated or sweetened", "0"),
    ("0712", "Dried vegetables", "0"),
    ("0713", "Dried leguminous vegetables (dal)", "0"),
    ("0901", "Coffee", "0"),
    ("0902", "Tea", "0"),
    ("0910", "Ginger, turmeric and other spices", "0"),
    ("1101", "Wheat or meslin flour", "0"),
    ("1507", "Soya-bean oil", "0"),
    ("1514", "Rape, colza or mustard oil", "0"),
    ("1905", "Bread, pastry, cakes, biscuits", "0"),
    ("2501", "Salt", "0"),
])

_TWELVE_PERCENT = _entries(GSTRate.TWELVE, [
    ("0405", "Butter and ghee", "0"),
    ("2007", "Jams, fruit jellies, marmalades", "0"),
    ("2009", "Fruit juices", "0"),
    ("2103", "Sauces, ketchup and condiments", "0"),
    ("6203", "Men's suits, ensembles, jackets, blazers", "0"),
])

_EIGHTEEN_PERCENT = _entries(GSTRate.EIGHTEEN, [
    ("1806", "Chocolate and cocoa preparations", "0"),
    ("1902", "Pasta and noodles", "0"),
    ("2106", "Food preparations not elsewhere specified", "0"),
    ("3305", "Preparations for use on the hair", "0"),
    ("3306", "Preparations for oral hygiene", "0"),
    ("3401", "Soap", "0"),
    ("3402", "Detergents and washing preparations", "0"),
    ("8471", "Computers and data processing machines", "0"),
    ("8517", "Telephone sets, mobile phones", "0"),
])

_TWENTY_EIGHT_PERCENT = _entries(GSTRate.TWENTY_EIGHT, [
    ("2202", "Aerated waters and soft drinks", "12"),
    ("2208", "Spirits, liqueurs and other spirituous beverages", "0"),
    ("2402", "Cigars, cheroots, cigarillos and cigarettes", "0"),
    ("8415", "Air conditioning machines", "0"),
])

_FORTY_PERCENT = _entries(GSTRate.FORTY, [
    ("7113", "Articles of jewellery of precious metal", "0"),
    ("7114", "Articles of goldsmiths' or silversmiths' wares", "0"),
    ("7116", "Articles of natural or cultured pearls, precious stones", "0"),
    ("8704", "Motor vehicles for transport of goods (luxury variants)", "0"),
    ("8802", "Aircraft, aeroplanes and other aircraft", "0"),
    ("8903", "Yachts and other vessels for pleasure or sports", "0"),
    ("9401", "Luxury furniture and seating", "0"),
    ("9701", "Paintings, drawings and pastels executed by hand", "0"),
    ("9702", "Original engravings, prints and lithographs", "0"),
    ("9703", "Original sculptures and statuary", "0"),
])

HSN_RATE_TABLE: Dict[str, HSNEntry] = {
    entry.hsn_code: entry
    for entry in (
        _NIL_RATED
        + _FIVE_PERCENT
        + _TWELVE_PERCENT
        + _EIGHTEEN_PERCENT
        + _TWENTY_EIGHT_PERCENT
        + _FORTY_PERCENT
    )
}


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_hsn_entry(hsn_code: Optional[str]) -> Optional[HSNEntry]:
    """
    Get the table entry for an HSN code.

    Matching is exact after removing whitespace; an 8-digit code does not
    inherit the rate of its 4-digit heading.

    Args:
        hsn_code: HSN code

    Returns:
        HSNEntry if listed, None otherwise
    """
    if not hsn_code:
        return None
    return HSN_RATE_TABLE.get(clean_hsn_code(hsn_code))


def get_default_gst_rate() -> GSTRate:
    """
    Get default GST rate for products without HSN mapping.
    Returns 18% (covers most FMCG items).
    """
    return GSTRate.EIGHTEEN


def get_all_gst_rates() -> List[Decimal]:
    """
    Get list of all GST slabs.

    Returns:
        List of Decimal values [0, 5, 12, 18, 28, 40]
    """
    return [rate.value for rate in GSTRate]
