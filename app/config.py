from typing import List, Literal, Optional, Union
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    # App Info
    APP_NAME: str = "C2L Assessment Report API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000"

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    # Complexity rules
    # Optional CSV export of the feature list (Feature Area, Feature, Complexity, Feasibility)
    VISUALIZATION_MAPPING_PATH: Optional[str] = None
    # Level for calculated fields whose calculation_type has no rule
    CALCULATED_FIELD_UNKNOWN_COMPLEXITY: Literal["low", "critical"] = "low"
    # Overall complexity is High when more than this share of dashboards is high
    HIGH_COMPLEXITY_SHARE_THRESHOLD: float = 0.3

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        return str(v).strip().upper()

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def mapping_override_enabled(self) -> bool:
        """True if a visualization mapping CSV is configured."""
        return bool(self.VISUALIZATION_MAPPING_PATH)


# Create settings instance
settings = Settings()
