"""
Servicio de assessment: camino de escritura del perfil.

submit: respuestas -> texto por eje -> embeddings (un batch) -> upsert.
Si el proveedor de embeddings falla no se guarda nada y el perfil
anterior queda intacto.
"""

from typing import Any, Optional

import structlog

from identity_matcher.assessment.assembler import assemble_profile
from identity_matcher.assessment.questions import all_question_ids, list_sections
from identity_matcher.config import get_settings
from identity_matcher.errors import InvalidAnswers
from identity_matcher.interfaces import AssessmentStore, Embedder, ProfileStore
from identity_matcher.models import (
    Answers,
    Assessment,
    Profile,
    ProfileStatus,
    SubmitResult,
)

logger = structlog.get_logger()


def validate_answers(answers: Any) -> Answers:
    """
    Verifica que las respuestas sean un mapa {str: int | str}.

    Raises:
        InvalidAnswers: Si la forma no es válida
    """
    if not isinstance(answers, dict):
        raise InvalidAnswers("Las respuestas deben ser un objeto {question_id: valor}")

    for question_id, value in answers.items():
        if not isinstance(question_id, str):
            raise InvalidAnswers(f"ID de pregunta inválido: {question_id!r}")
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise InvalidAnswers(
                f"Respuesta inválida para {question_id}: se espera entero 1-5 o texto"
            )
    return answers


class AssessmentService:
    """Orquesta assembler, gateway de embeddings y storage."""

    def __init__(
        self,
        embedder: Embedder,
        profile_store: ProfileStore,
        assessment_store: AssessmentStore,
        assessment_name: Optional[str] = None,
        assessment_version: Optional[float] = None,
    ):
        settings = get_settings()
        self.embedder = embedder
        self.profile_store = profile_store
        self.assessment_store = assessment_store
        self.assessment_name = assessment_name or settings.assessment_name
        self.assessment_version = (
            settings.assessment_version if assessment_version is None else assessment_version
        )

    @staticmethod
    def questions() -> list[dict]:
        """Definición del cuestionario para la UI."""
        return list_sections()

    async def submit(self, user_id: str, answers: Answers) -> SubmitResult:
        """
        Procesa un assessment completo y reemplaza el perfil del usuario.

        Args:
            user_id: Usuario autenticado
            answers: Mapa {question_id: valor}

        Returns:
            SubmitResult con el estado de completitud del perfil

        Raises:
            InvalidAnswers: Respuestas mal formadas
            EmbeddingProviderError: El proveedor falló tras los reintentos
        """
        answers = validate_answers(answers)

        unknown = sorted(set(answers) - all_question_ids())
        if unknown:
            logger.debug("Respuestas a preguntas desconocidas ignoradas", user_id=user_id, ids=unknown)

        text = assemble_profile(answers)
        vectors = await self.embedder.embed_batch(text.as_list())

        profile = Profile.build(
            user_id=user_id,
            text=text,
            embeddings=vectors,
            assessment_version=self.assessment_version,
        )

        # El registro se guarda sólo si el perfil quedó persistido
        saved = await self.profile_store.save_profile(profile)
        await self.assessment_store.create(
            Assessment(
                user_id=user_id,
                assessment_name=self.assessment_name,
                answers=answers,
            )
        )

        logger.info(
            "Assessment procesado",
            user_id=user_id,
            answers=len(answers),
            profile_complete=saved.is_complete,
        )
        return SubmitResult(success=True, profile_complete=saved.is_complete)

    async def profile_status(self, user_id: str) -> ProfileStatus:
        """Estado del assessment y del perfil de un usuario."""
        assessment = await self.assessment_store.get_latest_for_user(user_id)
        profile = await self.profile_store.get_profile(user_id)

        return ProfileStatus(
            has_assessment=assessment is not None,
            has_profile=bool(profile and profile.is_complete),
            assessment_name=assessment.assessment_name if assessment else None,
            completed_at=assessment.completed_at if assessment else None,
        )
