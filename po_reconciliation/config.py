"""
Configuration for the purchase-order receiving reconciliation system.
"""

# Load environment variables FIRST
from dotenv import load_dotenv
load_dotenv()

import os
from typing import Optional


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """Base configuration."""
    
    # Matching
    QUANTITY_MATCH_TOLERANCE: float = float(os.getenv("QUANTITY_MATCH_TOLERANCE", "1e-9"))
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: str = os.getenv("LOG_FILE", "po_reconciliation.log")  # blank disables file logging
    
    # Storage
    STORE_PATH: str = os.getenv(
        "STORE_PATH",
        os.path.join(os.path.dirname(__file__), "data", "receiving_store.json"),
    )
    
    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_DEBUG: bool = os.getenv("API_DEBUG", "false").lower() == "true"
    
    # Workflow Configuration
    GRAPH_RECURSION_LIMIT: int = 25
    
    @classmethod
    def validate(cls) -> None:
        """Validate configuration."""
        if cls.QUANTITY_MATCH_TOLERANCE <= 0:
            raise ValueError(
                f"QUANTITY_MATCH_TOLERANCE must be positive, got {cls.QUANTITY_MATCH_TOLERANCE}"
            )
        
        if cls.LOG_LEVEL not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid LOG_LEVEL: {cls.LOG_LEVEL}")


class DevelopmentConfig(Config):
    """Development configuration."""
    LOG_LEVEL = "DEBUG"
    API_DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    LOG_LEVEL = "INFO"
    API_DEBUG = False


class TestConfig(Config):
    """Test configuration."""
    LOG_LEVEL = "DEBUG"
    LOG_FILE = ""


def get_config(env: Optional[str] = None) -> Config:
    """Get configuration based on environment."""
    if env is None:
        env = os.getenv("ENV", "development").lower()
    
    if env == "production":
        config = ProductionConfig()
    elif env == "test":
        config = TestConfig()
    else:
        config = DevelopmentConfig()
    
    # Validate configuration on creation
    config.validate()
    return config
