from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    booking_api_key: str = ""
    airbnb_api_key: str = ""
    rapidapi_key: str = ""
    amadeus_api_key: str = ""
    amadeus_api_secret: str = ""
    amadeus_base_url: str = "https://test.api.amadeus.com"
    sabre_client_id: str = ""
    sabre_client_secret: str = ""
    sabre_base_url: str = "https://api.cert.platform.sabre.com"
    travelpayouts_token: str = ""
    xotelo_enabled: bool = True

    provider_timeout: float = 8.0
    http_timeout: float = 30.0
    default_currency: str = "EUR"

    rate_limit_search_max_requests: int = 30
    rate_limit_search_window_ms: int = 60_000

    log_level: str = "INFO"
