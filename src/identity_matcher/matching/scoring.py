"""
Pesos por eje y score ponderado.
"""

import math
from typing import Mapping, Optional, Union

from identity_matcher.errors import InvalidWeights
from identity_matcher.models import AXES, Axis

DEFAULT_WEIGHTS: dict[Axis, float] = {
    Axis.PSYCHOLOGICAL: 0.45,
    Axis.VALUES: 0.25,
    Axis.INTERESTS: 0.20,
    Axis.BEHAVIORAL: 0.10,
}

WeightsInput = Mapping[Union[Axis, str], float]


def _to_axis(key: Union[Axis, str]) -> Axis:
    try:
        return Axis(key)
    except ValueError:
        raise InvalidWeights(f"Eje desconocido en pesos: {key!r}") from None


def normalize_weights(weights: Optional[WeightsInput] = None) -> dict[Axis, float]:
    """
    Valida pesos custom y los re-normaliza para que sumen 1.0.

    Args:
        weights: Mapa eje -> peso (claves Axis o su nombre). None usa
            los pesos por defecto.

    Raises:
        InvalidWeights: Si falta algún eje, sobra una clave, algún peso es
            negativo o no numérico, o todos son cero
    """
    if weights is None:
        return dict(DEFAULT_WEIGHTS)

    parsed: dict[Axis, float] = {}
    for key, value in weights.items():
        axis = _to_axis(key)
        if axis in parsed:
            raise InvalidWeights(f"Eje repetido en pesos: {axis.value}")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidWeights(f"Peso no numérico para {axis.value}: {value!r}")
        if not math.isfinite(value) or value < 0:
            raise InvalidWeights(f"Peso inválido para {axis.value}: {value}")
        parsed[axis] = float(value)

    missing = [axis.value for axis in AXES if axis not in parsed]
    if missing:
        raise InvalidWeights(f"Faltan pesos para: {', '.join(missing)}")

    total = sum(parsed.values())
    if total <= 0:
        raise InvalidWeights("La suma de los pesos debe ser mayor a cero")

    return {axis: parsed[axis] / total for axis in AXES}


def weighted_score(similarities: Mapping[Axis, float], weights: Mapping[Axis, float]) -> float:
    """Promedio ponderado de las similitudes por eje."""
    return sum(weights[axis] * similarities[axis] for axis in AXES)
