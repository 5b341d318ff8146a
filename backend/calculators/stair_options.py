"""
Stair option generator: proposes buildable step counts around the user's choice.

Candidates are always desired - 1, desired, desired + 1, in that order.
A staircase needs at least 2 steps, so smaller candidates are dropped, and
a desired count below 2 yields no options at all (not a lone 2-step option).
No search, no optimizer.
"""

from dataclasses import asdict, dataclass
from typing import List, Optional

from .base import BaseCalculator
from .pricing_table import total_price

MIN_STEPS = 2


@dataclass(frozen=True)
class CalculatorInput:
    """Measurements from the calculator form, already in centimeters."""
    total_height: float
    desired_steps: int
    stair_width: int
    tread_depth: int


@dataclass(frozen=True)
class ProposalOption:
    option_number: int
    steps: int
    step_height: float   # cm
    total_length: float  # cm, top landing is not a tread
    total_price: float
    stair_width: int
    tread_depth: int

    def to_dict(self) -> dict:
        return asdict(self)


def candidate_steps(desired_steps: int) -> List[int]:
    """[desired - 1, desired, desired + 1] minus anything below MIN_STEPS."""
    if desired_steps < MIN_STEPS:
        return []
    candidates = [desired_steps - 1, desired_steps, desired_steps + 1]
    return [s for s in candidates if s >= MIN_STEPS]


def generate_options(data: CalculatorInput) -> List[ProposalOption]:
    """
    Build priced options for one calculation request.

    Returns 0 to 3 options. desired_steps of 1 (or less) gives an empty list;
    the caller decides how to tell the user.
    """
    options = []
    for index, steps in enumerate(candidate_steps(data.desired_steps)):
        options.append(ProposalOption(
            option_number=index + 1,
            steps=steps,
            step_height=data.total_height / steps,
            total_length=(steps - 1) * data.tread_depth,
            total_price=total_price(data.stair_width, data.tread_depth, steps),
            stair_width=data.stair_width,
            tread_depth=data.tread_depth,
        ))
    return options


def select_default_option(options: List[ProposalOption],
                          desired_steps: int) -> Optional[ProposalOption]:
    """The option matching desired_steps, else the first one, else None."""
    for option in options:
        if option.steps == desired_steps:
            return option
    return options[0] if options else None


def find_option(options: List[ProposalOption],
                option_number: int) -> Optional[ProposalOption]:
    for option in options:
        if option.option_number == option_number:
            return option
    return None


class StairOptionCalculator(BaseCalculator):
    """Form-fields front end for generate_options."""

    NO_OPTIONS_MESSAGE = (
        "Nenhuma configuração válida: informe pelo menos 2 degraus."
    )

    def parse_input(self, fields: dict) -> CalculatorInput:
        return CalculatorInput(
            total_height=self.parse_centimeters(
                fields.get("total_height"), unit=fields.get("height_unit", "cm")),
            desired_steps=self.parse_int(fields.get("desired_steps")),
            stair_width=self.parse_int(fields.get("stair_width")),
            tread_depth=self.parse_int(fields.get("tread_depth")),
        )

    def calculate(self, fields: dict) -> dict:
        data = self.parse_input(fields)
        options = generate_options(data)
        selected = select_default_option(options, data.desired_steps)
        return {
            "input": asdict(data),
            "options": [o.to_dict() for o in options],
            "selected_option_number": selected.option_number if selected else None,
            "message": None if options else self.NO_OPTIONS_MESSAGE,
        }
