"""
Abstract base class for the staircase calculators.

Input: raw form fields dict (strings or numbers, as typed by the user)
Output: plain dict ready for JSON / the quote assembly stage
"""

from abc import ABC, abstractmethod


class BaseCalculator(ABC):
    """All calculators inherit from this."""

    @abstractmethod
    def calculate(self, fields: dict) -> dict:
        """
        Takes the raw form fields.
        Returns a JSON-ready dict. Never raises on bad numbers.
        """
        pass

    # --- Helper methods for all calculators ---

    def parse_number(self, value, default: float = 0.0) -> float:
        """Parse a numeric value from user input. Accepts '5,80' as well as '5.80'."""
        if value is None:
            return default
        try:
            return float(str(value).strip().replace(",", "."))
        except (ValueError, TypeError):
            return default

    def parse_int(self, value, default: int = 0) -> int:
        """Parse an integer from user input. '12.7' -> 12."""
        if value is None:
            return default
        try:
            return int(float(str(value).strip().replace(",", ".")))
        except (ValueError, TypeError):
            return default

    def parse_centimeters(self, value, unit: str = "cm", default: float = 0.0) -> float:
        """Parse a length typed in cm or m and return centimeters."""
        number = self.parse_number(value, default=default)
        if str(unit or "cm").strip().lower() == "m":
            return self.meters_to_cm(number)
        return number

    def meters_to_cm(self, meters: float) -> float:
        return meters * 100.0
