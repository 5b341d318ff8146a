"""
Shared test fixtures: test client and sample request builders.
"""

import os
import pytest
from fastapi.testclient import TestClient

# No real lookups from tests, whatever the developer's .env says
os.environ["GEMINI_API_KEY"] = ""
os.environ["GOOGLE_MAPS_API_KEY"] = ""

from backend.main import app


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def calculator_payload():
    """The calculator form's own defaults: 300 cm, 12 steps, 70 x 20 cm."""
    return {
        "total_height": 300,
        "height_unit": "cm",
        "desired_steps": 12,
        "stair_width": 70,
        "tread_depth": 20,
    }


@pytest.fixture
def quote_payload(calculator_payload):
    return {
        "calculator": calculator_payload,
        "freight": {
            "distance_km": 100,
            "fuel_price_per_liter": 5.80,
            "consumption_km_per_liter": 8,
            "toll_cost": 25.40,
        },
        "installation_included": True,
        "installation_cost": 350,
        "client": {
            "name": "Maria Souza",
            "cpf": "123.456.789-00",
            "address": "Rua das Flores, 100 - Campinas/SP",
        },
    }
