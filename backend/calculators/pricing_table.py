"""
Pricing table for prefabricated staircases.

Unit price per step comes from the stair width tier, scaled by a tread
depth multiplier. Out-of-range values fall back to defaults instead of
failing; range checks belong to the input form.
"""

# (min_cm, max_cm, price per step in BRL), inclusive bounds
WIDTH_TIERS = [
    (40, 50, 410.00),
    (51, 70, 425.00),
    (71, 80, 440.00),
    (81, 90, 490.00),
]
DEFAULT_BASE_PRICE = 425.00

# (min_cm, max_cm, multiplier). None = open lower bound.
DEPTH_TIERS = [
    (None, 20, 1.00),
    (21, 25, 1.05),
    (26, 30, 1.10),
]
# Deeper than 30 cm lands here too, not on the 1.10 tier.
DEFAULT_DEPTH_MULTIPLIER = 1.00


def base_price(width: float) -> float:
    """Price per step for a stair width in cm."""
    for low, high, price in WIDTH_TIERS:
        if low <= width <= high:
            return price
    return DEFAULT_BASE_PRICE


def depth_multiplier(depth: float) -> float:
    """Price multiplier for a tread depth in cm."""
    for low, high, factor in DEPTH_TIERS:
        if (low is None or depth >= low) and depth <= high:
            return factor
    return DEFAULT_DEPTH_MULTIPLIER


def total_price(width: float, depth: float, steps: int) -> float:
    """Price of a staircase with `steps` treads. Zero or negative steps cost 0."""
    if steps <= 0:
        return 0.0
    return base_price(width) * depth_multiplier(depth) * steps


# Name used by the quote layer and the API
price_option = total_price
