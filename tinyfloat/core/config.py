"""Library configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """TinyFloat settings."""
    
    # Precision
    DEFAULT_PRECISION: int = Field(default=16, ge=0)
    GUARD_DIGITS: int = Field(default=3, ge=1)
    
    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False
    
    # Monitoring
    ENABLE_METRICS: bool = True
    WARN_ON_FLOAT_PRECISION_LOSS: bool = True
    
    class Config:
        env_file = ".env"
        env_prefix = "TINYFLOAT_"
        case_sensitive = True


settings = Settings()
