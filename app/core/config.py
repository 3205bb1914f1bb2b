"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings

# AlphaUSD on Tempo testnet; the pain.001 format has no token field so every
# parsed payment is denominated in it.
ALPHA_USD = "0x20c0000000000000000000000000000000000001"


class Settings(BaseSettings):
    """Application settings with defaults and env var overrides."""

    # Database
    database_url: str = "sqlite:///./payroll.db"

    # App
    app_env: str = "development"
    app_port: int = 8000
    log_level: str = "INFO"

    # Chain
    primary_token: str = ALPHA_USD
    fee_token: str = ALPHA_USD
    explorer_url: str = "https://explore.tempo.xyz"
    default_token_decimals: int = 6

    # Batch execution
    batch_size: int = 10
    batch_pause_ms: int = 500
    fee_per_transaction: float = 0.001
    gas_estimate_placeholder: str = "0.001"
    bundle_fee_estimate: str = "0.002"

    # Validation thresholds (token units)
    large_amount_threshold: float = 100000.0
    small_amount_threshold: float = 1.0

    # Local state
    activity_log_cap: int = 200

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
