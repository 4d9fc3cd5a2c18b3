"""
Registro de un assessment enviado.

Las respuestas son un mapa {question_id: valor}, donde el valor es un
entero de escala cerrada (1-5) o texto libre.
"""

from datetime import datetime, timezone
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

AnswerValue = Union[int, str]
Answers = dict[str, AnswerValue]


class Assessment(BaseModel):
    """Assessment guardado antes de regenerar el perfil."""

    id: Optional[str] = Field(None, description="UUID generado por la base")
    user_id: str
    assessment_name: str
    answers: Answers = Field(default_factory=dict)
    status: Literal["in_progress", "completed"] = "completed"
    completed_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump(exclude={"id"})


class SubmitResult(BaseModel):
    """Respuesta de la operación de escritura."""

    success: bool
    profile_complete: bool


class ProfileStatus(BaseModel):
    """Estado del assessment y del perfil de un usuario."""

    has_assessment: bool
    has_profile: bool
    assessment_name: Optional[str] = None
    completed_at: Optional[str] = None
