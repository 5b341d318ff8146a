"""
Stair options endpoint.

POST /api/stairs/options - measurements in, up to 3 priced step configurations out.
"""

from fastapi import APIRouter

from .. import schemas
from ..calculators.stair_options import StairOptionCalculator

router = APIRouter(prefix="/stairs", tags=["stairs"])

calculator = StairOptionCalculator()


@router.post("/options", response_model=schemas.OptionsResponse)
def calculate_options(request: schemas.CalculatorRequest):
    """
    Generate options for desired_steps - 1, desired_steps, desired_steps + 1.

    An empty list is not an error: the response carries a message asking for
    more steps and no selected option.
    """
    return calculator.calculate(request.model_dump())
