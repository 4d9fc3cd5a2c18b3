"""
Matemática vectorial para similitud entre embeddings.

Desacoplada del storage: el motor recibe listas de floats y calcula todo
en memoria.
"""

import math
from typing import Sequence


def dot(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """Producto punto de dos vectores de igual dimensión."""
    if len(vec1) != len(vec2):
        raise ValueError(
            f"Dimensiones distintas: {len(vec1)} vs {len(vec2)}"
        )
    return sum(a * b for a, b in zip(vec1, vec2))


def norm(vec: Sequence[float]) -> float:
    """Norma euclídea."""
    return math.sqrt(sum(a * a for a in vec))


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Calcula la similitud de coseno entre dos vectores.

    No se recorta a [0, 1]: el valor crudo en [-1, 1] pasa tal cual
    al score ponderado.

    Args:
        vec1: Primer vector
        vec2: Segundo vector

    Returns:
        Similitud de coseno, o 0.0 si alguno de los vectores es nulo

    Raises:
        ValueError: Si las dimensiones no coinciden
    """
    dot_product = dot(vec1, vec2)
    norm1 = norm(vec1)
    norm2 = norm(vec2)

    if norm1 == 0 or norm2 == 0:
        return 0.0

    return dot_product / (norm1 * norm2)
