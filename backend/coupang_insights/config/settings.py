"""
Application settings and configuration.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration using environment variables."""
    
    # Database (backs the key-value record store)
    DATABASE_URL: str = "sqlite:///./coupang_insights.db"
    
    # API
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    
    # Ingestion
    HEADER_SCAN_ROWS: int = 20
    SALES_BARCODE_FALLBACK_COLUMN: int = 8    # Column I in legacy sales exports
    MASTER_BARCODE_FALLBACK_COLUMN: int = 10  # Column K in legacy master sheets
    
    # Forecasting defaults
    FORECAST_HORIZON_DAYS: int = 7
    RECENT_SALE_DATES: int = 7
    WARNING_COVER_DAYS: int = 14
    
    # Dashboard
    STOCK_WARNING_THRESHOLD: int = 5
    REVENUE_PER_UNIT: int = 10000
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
