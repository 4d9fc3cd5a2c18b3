"""
Modelos transitorios del matching (no se persisten).
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from identity_matcher.models.profile import AXES, Axis


@dataclass(frozen=True)
class GeoPoint:
    """Punto geográfico en grados decimales (WGS84)."""

    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitud fuera de rango: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitud fuera de rango: {self.longitude}")


@dataclass
class MatchCandidate:
    """Vectores + atributos demográficos de un usuario durante una consulta."""

    user_id: str
    embeddings: dict[Axis, Optional[list[float]]] = field(default_factory=dict)
    gender: Optional[str] = None
    birthdate: Optional[date] = None
    location: Optional[GeoPoint] = None

    @property
    def is_complete(self) -> bool:
        return all(self.embeddings.get(axis) for axis in AXES)

    def age_on(self, today: date) -> Optional[int]:
        """Edad en años cumplidos a la fecha dada."""
        if self.birthdate is None:
            return None
        had_birthday = (today.month, today.day) >= (
            self.birthdate.month,
            self.birthdate.day,
        )
        return today.year - self.birthdate.year - (0 if had_birthday else 1)


def _years_before(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # 29 de febrero en un año no bisiesto
        return today.replace(year=today.year - years, day=28)


@dataclass(frozen=True)
class CandidateFilter:
    """
    Criterios de elegibilidad de un candidato (filtros hard).

    El storage puede usarlos para pre-filtrar; el motor vuelve a aplicar
    `accepts` sobre cada candidato recibido. La distancia no se evalúa
    acá: el motor la calcula porque además la devuelve en el resultado.
    """

    exclude_user_id: str
    today: date
    allowed_user_ids: Optional[frozenset[str]] = None  # None = sin scope de cliente
    genders: Optional[frozenset[str]] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    reference_point: Optional[GeoPoint] = None
    max_distance_km: Optional[float] = None
    require_complete: bool = True

    def birthdate_bounds(self) -> tuple[Optional[date], Optional[date]]:
        """
        Rango de fechas de nacimiento equivalente al rango de edades.

        Returns:
            (nacido_después_de, nacido_hasta_inclusive); el primero es
            exclusivo. None donde no hay límite.
        """
        born_after = None
        born_on_or_before = None
        if self.min_age is not None:
            born_on_or_before = _years_before(self.today, self.min_age)
        if self.max_age is not None:
            born_after = _years_before(self.today, self.max_age + 1)
        return born_after, born_on_or_before

    def accepts(self, candidate: MatchCandidate) -> bool:
        """Aplica scope, completitud y filtros demográficos."""
        if candidate.user_id == self.exclude_user_id:
            return False
        if self.allowed_user_ids is not None and candidate.user_id not in self.allowed_user_ids:
            return False
        if self.require_complete and not candidate.is_complete:
            return False
        if self.genders and candidate.gender not in self.genders:
            return False
        if self.min_age is not None or self.max_age is not None:
            age = candidate.age_on(self.today)
            if age is None:
                return False
            if self.min_age is not None and age < self.min_age:
                return False
            if self.max_age is not None and age > self.max_age:
                return False
        return True


@dataclass
class MatchResult:
    """Resultado de matching para un candidato."""

    user_id: str
    score: float  # Promedio ponderado de cosenos crudos
    breakdown: dict[Axis, float]
    distance_km: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "score": self.score,
            "breakdown": {axis.value: self.breakdown[axis] for axis in AXES},
            "distance_km": self.distance_km,
        }
