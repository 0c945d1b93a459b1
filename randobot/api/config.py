"""
Configuration management for the API
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings from environment variables"""

    # Server configuration
    PORT: int = int(os.getenv("PORT", 5000))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    RELOAD: bool = os.getenv("RELOAD", "false").lower() == "true"

    # Data
    DATA_PATH: str = os.getenv("DATA_PATH", "data/website_data.json")
    ROOT_URL: str = os.getenv("ROOT_URL", "https://hiking-gallery.vercel.app")

    # Generative fallback
    GOOGLE_API_KEY: Optional[str] = os.getenv("GOOGLE_API_KEY")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "gemini-2.0-flash")
    ENABLE_FALLBACK: bool = os.getenv("ENABLE_FALLBACK", "true").lower() == "true"

    # Chat
    HISTORY_SIZE: int = int(os.getenv("HISTORY_SIZE", 10))

    # Logging configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE", "logs/randobot.log") or None

    # API configuration
    API_TITLE: str = "Randobot API"
    API_DESCRIPTION: str = "Assistant de questions-réponses pour une galerie de photos de randonnée"
    API_VERSION: str = "1.0.0"

    # CORS configuration
    CORS_ORIGINS: list = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

    @classmethod
    def get_example_questions(cls) -> list[str]:
        """Questions shown by the root endpoint"""
        return [
            "Combien de pages contient le site ?",
            "Quels sont les projets ?",
            "Combien de sorties en janvier 2024 ?",
            "Quelles sont les sorties à plus de 3000 m ?",
            "Il est quelle heure ?",
        ]


# Global settings instance
settings = Settings()
