from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import freight, quotes, stairs

logger = logging.getLogger("stairquote")

app = FastAPI(
    title="Stair Quote",
    description="Quoting tool for prefabricated staircases",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(stairs.router, prefix="/api")
app.include_router(freight.router, prefix="/api")
app.include_router(quotes.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "stairquote"}


@app.get("/api/settings/defaults")
def form_defaults():
    """Prefill values for the freight/installation form. No secrets."""
    return {
        "origin_cep": settings.DEFAULT_ORIGIN_CEP,
        "fuel_price_per_liter": settings.DEFAULT_FUEL_PRICE,
        "consumption_km_per_liter": settings.DEFAULT_CONSUMPTION_KM_PER_L,
        "installation_cost": settings.DEFAULT_INSTALLATION_COST,
        "quote_valid_days": settings.QUOTE_VALID_DAYS,
        "route_lookup": {
            "ai": bool(settings.GEMINI_API_KEY),
            "maps": bool(settings.GOOGLE_MAPS_API_KEY),
        },
    }


@app.on_event("startup")
def log_route_lookup_config():
    if not settings.GEMINI_API_KEY and not settings.GOOGLE_MAPS_API_KEY:
        logger.warning("No GEMINI_API_KEY or GOOGLE_MAPS_API_KEY: only manual freight is available")
