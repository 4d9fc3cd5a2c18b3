"""
Configuración centralizada del motor de matching.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py -> identity_matcher/ -> src/ -> raíz del proyecto
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase (se valida al pedir el cliente, no al cargar settings)
    supabase_url: Optional[str] = Field(None, description="URL del proyecto Supabase")
    supabase_key: Optional[str] = Field(None, description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Embeddings
    gemini_api_key: Optional[str] = Field(None, description="API key de Google Gemini")
    embedding_model: str = Field(
        "gemini-embedding-001", description="Modelo de embedding a usar"
    )
    embedding_dim: int = Field(
        1536, gt=0, description="Dimensión de los vectores (768, 1536 o 3072)"
    )
    embedding_max_attempts: int = Field(
        3, ge=1, le=10, description="Intentos máximos contra el proveedor"
    )
    embedding_backoff_initial: float = Field(
        0.5, ge=0.0, description="Espera inicial del backoff exponencial (segundos)"
    )
    embedding_backoff_max: float = Field(
        8.0, ge=0.0, description="Espera máxima entre reintentos (segundos)"
    )
    embedding_timeout: float = Field(
        30.0, gt=0.0, description="Timeout por request al proveedor (segundos)"
    )

    # Matching
    matching_default_limit: int = Field(
        10, ge=1, description="Cantidad de resultados si el caller no indica limit"
    )
    matching_max_limit: int = Field(
        100, ge=1, description="Techo duro de resultados por consulta"
    )
    candidate_page_size: int = Field(
        200, ge=1, description="Filas por página al recorrer candidatos"
    )
    candidate_scan_cap: Optional[int] = Field(
        None, ge=1, description="Máximo de candidatos a evaluar (None = todo el pool)"
    )

    # Assessment
    assessment_name: str = Field(
        "identity-matcher-v1", description="Nombre del cuestionario vigente"
    )
    assessment_version: float = Field(
        1.0, description="Versión del cuestionario guardada en cada perfil"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()
