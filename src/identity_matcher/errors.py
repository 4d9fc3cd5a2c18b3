"""
Excepciones del motor de matching.

Cada error lleva un `code` estable para que la capa de transporte
(GraphQL, REST, scripts) lo traduzca sin inspeccionar mensajes.
"""

from typing import Optional


class MatcherError(Exception):
    """
    Error base del sistema.

    Attributes:
        code: Identificador estable del error
        user_message: Mensaje apto para mostrar al usuario final
        retryable: Si el caller puede reintentar la operación completa
    """

    code: str = "MATCHER_ERROR"
    default_message: str = "Error interno del motor de matching"
    retryable: bool = False

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        return self.default_message

    def __str__(self):
        return self.message


class ProfileIncomplete(MatcherError):
    """El usuario semilla no tiene los cuatro embeddings."""

    code = "PROFILE_INCOMPLETE"
    default_message = "Completá el assessment antes de buscar matches"


class LocationRequired(MatcherError):
    """Se pidió filtrar por distancia pero el usuario semilla no tiene ubicación."""

    code = "LOCATION_REQUIRED"
    default_message = "Necesitamos tu ubicación para filtrar por distancia"


class InvalidWeights(MatcherError):
    """Pesos custom mal formados (faltan ejes, negativos o suma cero)."""

    code = "INVALID_WEIGHTS"
    default_message = "Los pesos de matching son inválidos"

    @property
    def user_message(self) -> str:
        return self.message


class InvalidQuery(MatcherError):
    """Parámetros de consulta fuera de rango (limit, edades, distancia)."""

    code = "INVALID_QUERY"
    default_message = "Parámetros de búsqueda inválidos"

    @property
    def user_message(self) -> str:
        return self.message


class InvalidAnswers(MatcherError):
    """Respuestas de assessment con forma inválida."""

    code = "INVALID_ANSWERS"
    default_message = "Las respuestas del assessment son inválidas"

    @property
    def user_message(self) -> str:
        return self.message


class EmbeddingProviderError(MatcherError):
    """El proveedor de embeddings falló tras agotar los reintentos."""

    code = "EMBEDDING_PROVIDER_ERROR"
    default_message = "No pudimos procesar tu assessment, intentá de nuevo"
    retryable = True

    def __init__(self, message: Optional[str] = None, attempts: int = 0):
        self.attempts = attempts
        super().__init__(message)


class NotFound(MatcherError):
    """Usuario o perfil inexistente en storage."""

    code = "NOT_FOUND"
    default_message = "Usuario no encontrado"

    def __init__(self, message: Optional[str] = None, user_id: Optional[str] = None):
        self.user_id = user_id
        super().__init__(message or f"Usuario no encontrado: {user_id}")
