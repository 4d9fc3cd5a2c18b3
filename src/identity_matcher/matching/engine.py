"""
Motor de matching entre usuarios.

Implementa:
- Filtro Hard: scope de consentimiento, género, edad y distancia máxima
- Similitud por eje: coseno entre los cuatro embeddings de cada par
- Ranking: promedio ponderado, desempate por user_id, top-K acotado
"""

import heapq
import math
from contextlib import aclosing
from datetime import date
from typing import Callable, Iterable, Optional

import structlog

from identity_matcher.config import get_settings
from identity_matcher.errors import (
    InvalidQuery,
    LocationRequired,
    NotFound,
    ProfileIncomplete,
)
from identity_matcher.interfaces import ConsentIndex, ProfileStore
from identity_matcher.matching.geo import haversine_km
from identity_matcher.matching.scoring import WeightsInput, normalize_weights, weighted_score
from identity_matcher.matching.vectors import cosine_similarity
from identity_matcher.models import (
    AXES,
    Axis,
    CandidateFilter,
    MatchCandidate,
    MatchResult,
    Profile,
)

logger = structlog.get_logger()


class _Ranked:
    """Envoltorio para el heap: la raíz es siempre el peor resultado retenido."""

    __slots__ = ("result",)

    def __init__(self, result: MatchResult):
        self.result = result

    def __lt__(self, other: "_Ranked") -> bool:
        if self.result.score != other.result.score:
            return self.result.score < other.result.score
        return self.result.user_id > other.result.user_id


def rank_key(result: MatchResult) -> tuple[float, str]:
    """Score descendente, user_id ascendente."""
    return (-result.score, result.user_id)


class MatchingEngine:
    """
    Motor de matching sin estado entre llamadas.

    Flujo de `find_matches`:
    1. Validar parámetros (pesos, limit, edades, distancia)
    2. Cargar el perfil semilla y exigir que esté completo
    3. Resolver el scope de consentimiento del cliente
    4. Recorrer candidatos, descartar los no elegibles y puntuar el resto
    5. Devolver los `limit` mejores con su breakdown por eje
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        consent_index: ConsentIndex,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
        scan_cap: Optional[int] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        settings = get_settings()
        self.profile_store = profile_store
        self.consent_index = consent_index
        self.max_limit = max_limit or settings.matching_max_limit
        self.default_limit = min(default_limit or settings.matching_default_limit, self.max_limit)
        self.scan_cap = scan_cap if scan_cap is not None else settings.candidate_scan_cap
        self._today = today or date.today

    def _validate_query(
        self,
        limit: int,
        min_age: Optional[int],
        max_age: Optional[int],
        max_distance_km: Optional[float],
    ) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int) or not 0 < limit <= self.max_limit:
            raise InvalidQuery(f"limit debe estar entre 1 y {self.max_limit}: {limit!r}")
        if min_age is not None and min_age < 0:
            raise InvalidQuery(f"min_age no puede ser negativa: {min_age}")
        if max_age is not None and max_age < 0:
            raise InvalidQuery(f"max_age no puede ser negativa: {max_age}")
        if min_age is not None and max_age is not None and min_age > max_age:
            raise InvalidQuery(f"min_age ({min_age}) mayor que max_age ({max_age})")
        if max_distance_km is not None and (
            not math.isfinite(max_distance_km) or max_distance_km < 0
        ):
            raise InvalidQuery(f"max_distance_km inválida: {max_distance_km}")

    async def find_matches(
        self,
        seed_user_id: str,
        client_id: Optional[str] = None,
        limit: Optional[int] = None,
        gender: Optional[Iterable[str]] = None,
        min_age: Optional[int] = None,
        max_age: Optional[int] = None,
        max_distance_km: Optional[float] = None,
        weights: Optional[WeightsInput] = None,
    ) -> list[MatchResult]:
        """
        Encuentra los usuarios más compatibles con el usuario semilla.

        Args:
            seed_user_id: Usuario para el que se buscan matches
            client_id: Cliente OAuth que consulta; sólo ve usuarios que le
                dieron consentimiento. None = acceso first-party sin scope
            limit: Máximo de resultados (1..max_limit)
            gender: Género o géneros aceptados; vacío o None no filtra
            min_age: Edad mínima inclusive
            max_age: Edad máxima inclusive
            max_distance_km: Distancia máxima; requiere ubicación del semilla
            weights: Pesos custom por eje (se re-normalizan a 1.0)

        Returns:
            Lista de MatchResult ordenada por score descendente

        Raises:
            InvalidWeights, InvalidQuery: Parámetros inválidos
            NotFound: El usuario semilla no existe
            ProfileIncomplete: Al perfil semilla le faltan embeddings
            LocationRequired: Se pidió distancia sin ubicación del semilla
        """
        # Paso 1: Validación (sin tocar storage)
        axis_weights = normalize_weights(weights)
        limit = self.default_limit if limit is None else limit
        self._validate_query(limit, min_age, max_age, max_distance_km)
        if isinstance(gender, str):
            gender = (gender,)
        genders = frozenset(gender) if gender else None

        # Paso 2: Usuario y perfil semilla
        seed_user = await self.profile_store.get_user(seed_user_id)
        if seed_user is None:
            logger.warning("Usuario semilla inexistente", user_id=seed_user_id)
            raise NotFound(user_id=seed_user_id)

        seed = await self.profile_store.get_profile(seed_user_id)
        if seed is None or not seed.is_complete:
            raise ProfileIncomplete(f"Perfil incompleto para {seed_user_id}")

        reference_point = seed_user.location
        if max_distance_km is not None and reference_point is None:
            raise LocationRequired(f"Usuario {seed_user_id} sin ubicación")

        # Paso 3: Scope del cliente
        allowed = None
        if client_id is not None:
            allowed = await self.consent_index.users_for_client(client_id)
            if not allowed:
                logger.info("Cliente sin usuarios con consentimiento", client_id=client_id)
                return []

        candidate_filter = CandidateFilter(
            exclude_user_id=seed_user_id,
            today=self._today(),
            allowed_user_ids=allowed,
            genders=genders,
            min_age=min_age,
            max_age=max_age,
            reference_point=reference_point,
            max_distance_km=max_distance_km,
        )

        # Paso 4: Recorrer y puntuar
        heap: list[_Ranked] = []
        scanned = 0
        eligible = 0

        async with aclosing(self.profile_store.list_candidates(candidate_filter)) as candidates:
            async for candidate in candidates:
                if self.scan_cap is not None and scanned >= self.scan_cap:
                    break
                scanned += 1

                result = self._score_candidate(seed, candidate, candidate_filter, axis_weights)
                if result is None:
                    continue
                eligible += 1

                ranked = _Ranked(result)
                if len(heap) < limit:
                    heapq.heappush(heap, ranked)
                elif heap[0] < ranked:
                    heapq.heapreplace(heap, ranked)

        # Paso 5: Orden final
        matches = sorted((r.result for r in heap), key=rank_key)

        logger.info(
            "Matches encontrados",
            user_id=seed_user_id,
            client_id=client_id,
            scanned=scanned,
            eligible=eligible,
            returned=len(matches),
        )
        return matches

    def _score_candidate(
        self,
        seed: Profile,
        candidate: MatchCandidate,
        candidate_filter: CandidateFilter,
        axis_weights: dict[Axis, float],
    ) -> Optional[MatchResult]:
        """Aplica los filtros hard y, si pasa, calcula score y breakdown."""
        if not candidate_filter.accepts(candidate):
            return None

        distance = None
        if candidate_filter.reference_point is not None and candidate.location is not None:
            distance = haversine_km(candidate_filter.reference_point, candidate.location)
            if (
                candidate_filter.max_distance_km is not None
                and distance > candidate_filter.max_distance_km
            ):
                return None

        similarities: dict[Axis, float] = {}
        for axis in AXES:
            seed_vector = seed.embedding_for(axis)
            candidate_vector = candidate.embeddings[axis]
            if len(seed_vector) != len(candidate_vector):
                logger.warning(
                    "Dimensión de embedding incompatible, candidato descartado",
                    user_id=candidate.user_id,
                    axis=axis.value,
                    seed_dim=len(seed_vector),
                    candidate_dim=len(candidate_vector),
                )
                return None
            similarities[axis] = cosine_similarity(seed_vector, candidate_vector)

        return MatchResult(
            user_id=candidate.user_id,
            score=weighted_score(similarities, axis_weights),
            breakdown=similarities,
            distance_km=distance,
        )
