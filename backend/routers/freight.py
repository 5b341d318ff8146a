"""
Freight endpoints.

POST /api/freight/estimate - distance + fuel economics -> round-trip fuel cost
POST /api/freight/route    - two CEPs -> one-way distance and tolls (external lookup)
"""

import logging

from fastapi import APIRouter, HTTPException

from .. import schemas
from ..calculators.freight import FreightCalculator
from ..route_resolver import RouteResolutionError, format_cep, is_valid_cep, resolve_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/freight", tags=["freight"])

calculator = FreightCalculator()


@router.post("/estimate", response_model=schemas.FreightResponse)
def estimate_freight(request: schemas.FreightRequest):
    """Zero or missing inputs give fuel_cost 0: freight not configured yet."""
    return calculator.calculate(request.model_dump())


@router.post("/route", response_model=schemas.RouteResponse)
def lookup_route(request: schemas.RouteRequest):
    if not is_valid_cep(request.origin_cep) or not is_valid_cep(request.destination_cep):
        raise HTTPException(
            status_code=422,
            detail="Por favor, preencha ambos os CEPs com 8 dígitos válidos.",
        )

    try:
        info = resolve_route(request.origin_cep, request.destination_cep, mode=request.mode)
    except RouteResolutionError as e:
        logger.warning("Route lookup failed (%s): %s", request.mode, e)
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "origin_cep": format_cep(request.origin_cep),
        "destination_cep": format_cep(request.destination_cep),
        "distance_km": info.distance_km,
        "toll_amount": info.toll_amount,
    }
