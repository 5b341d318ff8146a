from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal

from .calculators.stair_options import CalculatorInput, StairOptionCalculator
from .calculators.freight import FreightCalculator, FreightQuote
from .config import settings


class CalculatorRequest(BaseModel):
    total_height: float = Field(gt=0)
    height_unit: Literal["cm", "m"] = "cm"
    desired_steps: int = Field(gt=0)
    stair_width: int = Field(gt=0)
    tread_depth: int = Field(gt=0)

    def to_input(self) -> CalculatorInput:
        """Centimeter input, same conversion as /api/stairs/options."""
        return StairOptionCalculator().parse_input(self.model_dump())


class ProposalOptionOut(BaseModel):
    option_number: int
    steps: int
    step_height: float
    total_length: float
    total_price: float
    stair_width: int
    tread_depth: int


class OptionsResponse(BaseModel):
    options: List[ProposalOptionOut] = []
    selected_option_number: Optional[int] = None
    message: Optional[str] = None


class FreightRequest(BaseModel):
    distance_km: float = 0.0
    fuel_price_per_liter: float = settings.DEFAULT_FUEL_PRICE
    consumption_km_per_liter: float = settings.DEFAULT_CONSUMPTION_KM_PER_L
    toll_cost: float = Field(default=0.0, ge=0)

    def to_quote(self) -> FreightQuote:
        return FreightCalculator().parse_quote(self.model_dump())


class FreightResponse(BaseModel):
    distance_km: float
    fuel_price_per_liter: float
    consumption_km_per_liter: float
    toll_cost: float
    fuel_cost: float
    total: float


class RouteRequest(BaseModel):
    origin_cep: str = settings.DEFAULT_ORIGIN_CEP
    destination_cep: str
    mode: Literal["ai", "maps"] = "ai"


class RouteResponse(BaseModel):
    origin_cep: str
    destination_cep: str
    distance_km: float
    toll_amount: float


class ClientInfo(BaseModel):
    name: str
    cpf: Optional[str] = None  # CPF or CNPJ, optional on the proposal
    address: str               # job-site address

    @field_validator("name", "address")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Preencha o Nome do Cliente e o Endereço da Obra.")
        return v


class OptionsSummaryRequest(BaseModel):
    calculator: CalculatorRequest
    freight: FreightRequest = Field(default_factory=FreightRequest)
    installation_included: bool = True
    installation_cost: float = Field(default=settings.DEFAULT_INSTALLATION_COST, ge=0)


class QuoteRequest(OptionsSummaryRequest):
    option_number: Optional[int] = None  # None = default selection
    client: ClientInfo
