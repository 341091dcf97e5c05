"""
KitchenOps: reversible catalog mutations and atomic order fulfillment.
"""
__version__ = "0.1.0"
