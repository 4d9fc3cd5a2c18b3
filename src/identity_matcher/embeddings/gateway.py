"""
Gateway de embeddings.

Usa gemini-embedding-001 de Google para generar un vector de dimensión
fija por texto. Los cuatro ejes de un perfil se envían en un solo batch.
"""

import asyncio
from typing import Any, Optional

from google import genai
from google.genai import types
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from identity_matcher.config import get_settings
from identity_matcher.errors import EmbeddingProviderError

logger = structlog.get_logger()

# Texto que se embebe cuando un eje no tuvo respuestas
EMPTY_TEXT_PLACEHOLDER = "."


class _MalformedResponse(EmbeddingProviderError):
    """Respuesta con cantidad o dimensión de vectores inesperada."""


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Reintentando embedding",
        attempt=retry_state.attempt_number,
        wait=round(retry_state.next_action.sleep, 3) if retry_state.next_action else None,
        error=str(exc),
    )


class EmbeddingGateway:
    """
    Genera embeddings con reintentos y backoff exponencial.

    Cada request tiene timeout propio. Si se agotan los intentos se lanza
    EmbeddingProviderError y el caller descarta la actualización completa.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[Any] = None,
        model: Optional[str] = None,
        output_dim: Optional[int] = None,
        max_attempts: Optional[int] = None,
        backoff_initial: Optional[float] = None,
        backoff_max: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()

        if client is None:
            api_key = api_key or settings.gemini_api_key
            if not api_key:
                raise ValueError("GEMINI_API_KEY es requerida para embeddings.")
            client = genai.Client(api_key=api_key)

        self.client = client
        self.model_name = model or settings.embedding_model
        self.output_dim = output_dim or settings.embedding_dim
        self.max_attempts = max_attempts or settings.embedding_max_attempts
        self.backoff_initial = (
            settings.embedding_backoff_initial if backoff_initial is None else backoff_initial
        )
        self.backoff_max = settings.embedding_backoff_max if backoff_max is None else backoff_max
        self.timeout = timeout or settings.embedding_timeout

        logger.info(
            "Embedding gateway inicializado",
            model=self.model_name,
            dim=self.output_dim,
            max_attempts=self.max_attempts,
        )

    async def embed(self, text: str) -> list[float]:
        """Genera el embedding de un único texto."""
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Genera embeddings para varios textos en un solo request.

        Los textos vacíos se reemplazan por "." para que cada entrada
        tenga siempre su vector.

        Args:
            texts: Textos a embeber

        Returns:
            Un vector por texto, en el mismo orden

        Raises:
            EmbeddingProviderError: Si el proveedor falla en todos los intentos
        """
        if not texts:
            return []

        contents = [text if text.strip() else EMPTY_TEXT_PLACEHOLDER for text in texts]

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_initial, max=self.backoff_max),
            # CancelledError no es Exception: se propaga sin reintentar
            retry=(
                retry_if_exception_type(Exception)
                & retry_if_not_exception_type(_MalformedResponse)
            ),
            before_sleep=_log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    vectors = await self._request(contents)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(
                "Proveedor de embeddings agotó los reintentos",
                attempts=self.max_attempts,
                error=str(cause),
            )
            raise EmbeddingProviderError(
                f"Embedding falló tras {self.max_attempts} intentos: {cause}",
                attempts=self.max_attempts,
            ) from cause

        logger.debug(
            "Embeddings generados",
            count=len(vectors),
            embedding_dim=self.output_dim,
        )
        return vectors

    async def _request(self, contents: list[str]) -> list[list[float]]:
        response = await asyncio.wait_for(
            self.client.aio.models.embed_content(
                model=self.model_name,
                contents=contents,
                config=types.EmbedContentConfig(
                    task_type="SEMANTIC_SIMILARITY",
                    output_dimensionality=self.output_dim,
                ),
            ),
            timeout=self.timeout,
        )

        embeddings = response.embeddings or []
        if len(embeddings) != len(contents):
            raise _MalformedResponse(
                f"Se esperaban {len(contents)} embeddings, llegaron {len(embeddings)}"
            )

        vectors = [list(embedding.values) for embedding in embeddings]
        for vector in vectors:
            if len(vector) != self.output_dim:
                raise _MalformedResponse(
                    f"Dimensión inesperada: {len(vector)} (esperada {self.output_dim})"
                )
        return vectors
