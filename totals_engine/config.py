import os
from typing import List

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    # Presentation
    CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "£")

    # CORS Configuration
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_JSON = os.getenv("LOG_JSON", "false").lower() in ("1", "true", "yes")


config = Config()
