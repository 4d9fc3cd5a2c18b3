"""
Modelos de datos del sistema.

- Profile: perfil persistido con descripciones y embeddings por eje
- ConsentGrant: acceso otorgado por un usuario a un cliente OAuth
- Assessment: respuestas crudas del cuestionario
- User: datos demográficos y ubicación
- MatchCandidate / MatchResult: objetos transitorios del matching
"""

from identity_matcher.models.profile import AXES, Axis, Profile, ProfileText
from identity_matcher.models.consent import ConsentGrant
from identity_matcher.models.assessment import (
    Answers,
    AnswerValue,
    Assessment,
    ProfileStatus,
    SubmitResult,
)
from identity_matcher.models.match import (
    CandidateFilter,
    GeoPoint,
    MatchCandidate,
    MatchResult,
)
from identity_matcher.models.user import User

__all__ = [
    # Perfil
    "AXES",
    "Axis",
    "Profile",
    "ProfileText",
    # Consentimiento
    "ConsentGrant",
    # Assessment
    "Answers",
    "AnswerValue",
    "Assessment",
    "ProfileStatus",
    "SubmitResult",
    # Matching
    "CandidateFilter",
    "GeoPoint",
    "MatchCandidate",
    "MatchResult",
    # Usuario
    "User",
]
