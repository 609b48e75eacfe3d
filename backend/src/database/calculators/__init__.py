"""
Database calculators - business calculations shared by repositories and routes.
"""

from database.calculators.pricing import calculate_final_price

__all__ = ["calculate_final_price"]
