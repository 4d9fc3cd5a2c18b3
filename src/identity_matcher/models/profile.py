"""
Modelo de Perfil

Un perfil por usuario (1:1). Guarda las cuatro descripciones por eje
armadas desde el assessment y sus cuatro embeddings.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Axis(str, Enum):
    """Ejes independientes de compatibilidad."""

    PSYCHOLOGICAL = "psychological"
    VALUES = "values"
    INTERESTS = "interests"
    BEHAVIORAL = "behavioral"


# Orden canónico: assembler, batch de embeddings y breakdown lo respetan
AXES: tuple[Axis, ...] = (
    Axis.PSYCHOLOGICAL,
    Axis.VALUES,
    Axis.INTERESTS,
    Axis.BEHAVIORAL,
)


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProfileText(BaseModel):
    """Las cuatro descripciones en lenguaje natural de un perfil."""

    psychological: str
    values: str
    interests: str
    behavioral: str

    def for_axis(self, axis: Axis) -> str:
        return getattr(self, axis.value)

    def as_list(self) -> list[str]:
        """Textos en orden canónico de ejes."""
        return [self.for_axis(axis) for axis in AXES]


class Profile(BaseModel):
    """
    Perfil de matching de un usuario.

    Está "completo" sólo si los cuatro embeddings existen. La completitud
    decide si el usuario puede buscar matches o aparecer como candidato.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    user_id: str = Field(..., description="Dueño del perfil (único)")

    # Descripciones textuales (armadas por el assembler)
    psychological_desc: Optional[str] = None
    values_desc: Optional[str] = None
    interests_desc: Optional[str] = None
    behavioral_desc: Optional[str] = None

    # Embeddings por eje
    psychological_embedding: Optional[list[float]] = None
    values_embedding: Optional[list[float]] = None
    interests_embedding: Optional[list[float]] = None
    behavioral_embedding: Optional[list[float]] = None

    assessment_version: float = Field(default=1.0, description="Versión del cuestionario")
    updated_at: str = Field(default_factory=_utcnow_iso, description="Última actualización")

    @classmethod
    def build(
        cls,
        user_id: str,
        text: ProfileText,
        embeddings: list[list[float]],
        assessment_version: float = 1.0,
    ) -> "Profile":
        """
        Construye un perfil completo a partir del texto y sus vectores.

        Args:
            user_id: Dueño del perfil
            text: Descripciones por eje
            embeddings: Un vector por eje, en orden canónico
            assessment_version: Versión del cuestionario

        Raises:
            ValueError: Si no vienen exactamente cuatro vectores
        """
        if len(embeddings) != len(AXES):
            raise ValueError(
                f"Se esperaban {len(AXES)} embeddings, llegaron {len(embeddings)}"
            )

        data = {"user_id": user_id, "assessment_version": assessment_version}
        for axis, vector in zip(AXES, embeddings):
            data[f"{axis.value}_desc"] = text.for_axis(axis)
            data[f"{axis.value}_embedding"] = list(vector)
        return cls(**data)

    def embedding_for(self, axis: Axis) -> Optional[list[float]]:
        return getattr(self, f"{axis.value}_embedding")

    def description_for(self, axis: Axis) -> Optional[str]:
        return getattr(self, f"{axis.value}_desc")

    @property
    def is_complete(self) -> bool:
        return all(self.embedding_for(axis) for axis in AXES)

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para upsert en Supabase."""
        return self.model_dump()
