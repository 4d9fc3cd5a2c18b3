"""
Generación de embeddings.

Provee el gateway hacia el proveedor externo (Gemini) con reintentos.
"""

from identity_matcher.embeddings.gateway import EMPTY_TEXT_PLACEHOLDER, EmbeddingGateway

__all__ = [
    "EMPTY_TEXT_PLACEHOLDER",
    "EmbeddingGateway",
]
