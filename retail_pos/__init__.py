"""
Retail POS Billing

GST tax computation and offer stacking for point-of-sale billing.
"""

__version__ = "0.1.0"
