"""
Quote endpoints: nothing is stored, every call recomputes from the request.

POST /api/quotes/options-summary - per-option totals with current freight/installation
POST /api/quotes/preview         - PricedQuote JSON for the selected option
POST /api/quotes/pdf             - same quote as a downloadable PDF proposal
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from .. import schemas
from ..calculators.stair_options import find_option, generate_options, select_default_option
from ..pdf_generator import generate_proposal_pdf, proposal_filename
from ..pricing_engine import PricingEngine

router = APIRouter(prefix="/quotes", tags=["quotes"])

engine = PricingEngine()


def _build_quote(request: schemas.QuoteRequest) -> dict:
    data = request.calculator.to_input()
    options = generate_options(data)
    if not options:
        raise HTTPException(
            status_code=400,
            detail="Nenhuma configuração válida para o número de degraus informado.",
        )

    if request.option_number is None:
        option = select_default_option(options, data.desired_steps)
    else:
        option = find_option(options, request.option_number)
    if option is None:
        raise HTTPException(status_code=404, detail=f"Opção {request.option_number} não encontrada")

    installation = engine.installation_amount(
        request.installation_included, request.installation_cost,
    )
    return engine.build_priced_quote(
        option=option,
        freight=request.freight.to_quote(),
        installation_cost=installation,
        client=request.client.model_dump(),
    )


@router.post("/options-summary")
def options_summary(request: schemas.OptionsSummaryRequest):
    data = request.calculator.to_input()
    options = generate_options(data)
    installation = engine.installation_amount(
        request.installation_included, request.installation_cost,
    )
    return {"options": engine.option_totals(options, request.freight.to_quote(), installation)}


@router.post("/preview")
def preview_quote(request: schemas.QuoteRequest):
    return _build_quote(request)


@router.post("/pdf")
def download_pdf(request: schemas.QuoteRequest):
    """
    Returns: application/pdf attachment
    """
    priced_quote = _build_quote(request)
    pdf_bytes = generate_proposal_pdf(priced_quote)
    filename = proposal_filename(request.client.name)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )
