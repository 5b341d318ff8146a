"""
Quote assembly: combines a chosen stair option with freight, tolls,
installation and client details into a PricedQuote dict.

Pure math: no AI, no network. Route lookups happen before this stage;
by the time we get here freight is just numbers.

Input: ProposalOption + FreightQuote + installation + client info
Output: PricedQuote dict, consumed by the API and the PDF generator
"""

from datetime import date, timedelta
from typing import List, Optional

from .calculators.freight import FreightQuote, grand_total
from .calculators.stair_options import ProposalOption
from .config import settings


def format_currency_brl(value) -> str:
    """Format a number as R$ 1.234,56 (pt-BR)."""
    try:
        amount = float(value)
    except (ValueError, TypeError):
        amount = 0.0
    sign = "-" if amount < 0 else ""
    # Format en-US style, then swap separators
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def format_date_br(day: date) -> str:
    return day.strftime("%d/%m/%Y")


class PricingEngine:
    """
    Assembles the final PricedQuote from calculator and freight outputs.
    """

    def __init__(self, valid_days: Optional[int] = None):
        self.valid_days = valid_days if valid_days is not None else settings.QUOTE_VALID_DAYS

    def installation_amount(self, included: bool, cost: float) -> float:
        """Installation only counts when the box is ticked."""
        if not included:
            return 0.0
        return max(float(cost or 0.0), 0.0)

    def option_totals(self, options: List[ProposalOption], freight: FreightQuote,
                      installation_cost: float) -> List[dict]:
        """
        Per-option breakdown for the options list screen.
        Same freight/installation for every option, only the stair price differs.
        """
        fuel = freight.fuel_cost
        rows = []
        for option in options:
            total = grand_total(option.total_price, fuel, freight.toll_cost, installation_cost)
            rows.append({
                "option_number": option.option_number,
                "steps": option.steps,
                "stair_cost": round(option.total_price, 2),
                "freight_cost": round(fuel, 2),
                "toll_cost": round(freight.toll_cost, 2),
                "installation_cost": round(installation_cost, 2),
                "total": round(total, 2),
                "total_display": format_currency_brl(total),
            })
        return rows

    def build_priced_quote(self, option: ProposalOption, freight: FreightQuote,
                           installation_cost: float, client: dict,
                           quote_date: Optional[date] = None) -> dict:
        """
        Args:
            option: the selected ProposalOption
            freight: FreightQuote (distance/fuel/tolls)
            installation_cost: already zeroed if installation is not included
            client: {"name": str, "cpf": str | None, "address": str}
            quote_date: defaults to today

        Returns:
            PricedQuote dict
        """
        quote_date = quote_date or date.today()
        fuel = freight.fuel_cost
        total = grand_total(option.total_price, fuel, freight.toll_cost, installation_cost)

        line_items = [
            self._line("stair", "Custo da Escada", option.total_price),
            self._line("freight", "Custo do Frete", fuel),
            self._line("tolls", "Pedágios", freight.toll_cost),
            self._line("installation", "Custo de Instalação", installation_cost),
        ]

        return {
            "quote_date": quote_date.isoformat(),
            "quote_date_display": format_date_br(quote_date),
            "valid_days": self.valid_days,
            "valid_until": (quote_date + timedelta(days=self.valid_days)).isoformat(),
            "client": {
                "name": client.get("name", ""),
                "cpf": client.get("cpf") or None,
                "address": client.get("address", ""),
            },
            "option": option.to_dict(),
            "specifications": self._build_specifications(option),
            "freight": freight.to_dict(),
            "line_items": line_items,
            "stair_subtotal": round(option.total_price, 2),
            "freight_subtotal": round(fuel, 2),
            "toll_subtotal": round(freight.toll_cost, 2),
            "installation_subtotal": round(installation_cost, 2),
            "total": round(total, 2),
            "total_display": format_currency_brl(total),
        }

    def _line(self, key: str, description: str, amount: float) -> dict:
        return {
            "key": key,
            "description": description,
            "amount": round(amount, 2),
            "amount_display": format_currency_brl(amount),
        }

    def _build_specifications(self, option: ProposalOption) -> List[list]:
        """[label, value] rows for the proposal's spec table."""
        return [
            ["Número de Degraus (pisos)", f"{option.steps} unidades"],
            ["Altura por Degrau", f"{option.step_height:.2f} cm"],
            ["Largura da Escada", f"{option.stair_width} cm"],
            ["Profundidade do Pisante", f"{option.tread_depth} cm"],
            ["Comprimento Total da Escada", f"{option.total_length / 100:.2f} m"],
        ]
