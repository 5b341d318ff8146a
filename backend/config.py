from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    COMPANY_NAME: str = "Escadas Pré-Moldadas"
    COMPANY_EMAIL: str = ""
    COMPANY_PHONE: str = ""
    QUOTE_VALID_DAYS: int = 15

    # Freight and installation defaults shown to the user before they edit them
    DEFAULT_ORIGIN_CEP: str = "13104-096"
    DEFAULT_FUEL_PRICE: float = 5.80
    DEFAULT_CONSUMPTION_KM_PER_L: float = 8.0
    DEFAULT_INSTALLATION_COST: float = 350.00

    # Route lookups: optional, manual freight works without them
    CEP_API_URL: str = "https://brasilapi.com.br/api/cep/v2"
    GOOGLE_MAPS_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    ROUTE_TIMEOUT_SECONDS: int = 30

    class Config:
        env_file = ".env"


settings = Settings()
