"""
Freight cost model: round-trip fuel for the delivery vehicle.

The truck comes back empty, so the one-way distance is doubled.
Tolls and installation are separate additive terms, summed by the caller.
"""

from dataclasses import asdict, dataclass

from .base import BaseCalculator


def fuel_cost(distance_km: float, fuel_price_per_liter: float,
              consumption_km_per_liter: float) -> float:
    """Fuel cost in BRL. Any non-positive input means freight is not configured: 0."""
    if distance_km <= 0 or fuel_price_per_liter <= 0 or consumption_km_per_liter <= 0:
        return 0.0
    round_trip_km = distance_km * 2
    liters_needed = round_trip_km / consumption_km_per_liter
    return liters_needed * fuel_price_per_liter


compute_fuel_cost = fuel_cost


def grand_total(option_price: float, fuel: float, toll_cost: float,
                installation_cost: float) -> float:
    return option_price + fuel + toll_cost + installation_cost


@dataclass(frozen=True)
class FreightQuote:
    distance_km: float  # one-way
    fuel_price_per_liter: float
    consumption_km_per_liter: float
    toll_cost: float = 0.0

    @property
    def fuel_cost(self) -> float:
        return fuel_cost(self.distance_km, self.fuel_price_per_liter,
                         self.consumption_km_per_liter)

    @property
    def total(self) -> float:
        """Fuel plus tolls. Installation is not freight."""
        return self.fuel_cost + self.toll_cost

    def to_dict(self) -> dict:
        data = asdict(self)
        data["fuel_cost"] = self.fuel_cost
        data["total"] = self.total
        return data


class FreightCalculator(BaseCalculator):
    """
    Form-fields front end for the freight model.

    Manual mode: whatever the user typed; blanks and junk count as 0.
    """

    def parse_quote(self, fields: dict) -> FreightQuote:
        return FreightQuote(
            distance_km=self.parse_number(fields.get("distance_km")),
            fuel_price_per_liter=self.parse_number(fields.get("fuel_price_per_liter")),
            consumption_km_per_liter=self.parse_number(fields.get("consumption_km_per_liter")),
            toll_cost=max(self.parse_number(fields.get("toll_cost")), 0.0),
        )

    def calculate(self, fields: dict) -> dict:
        return self.parse_quote(fields).to_dict()
