"""
Repositorios sobre Supabase.

Tablas y vistas usadas:
- profiles: un perfil por usuario (upsert por user_id)
- user: género, fecha de nacimiento y ubicación (latitude/longitude)
- match_candidates: vista profiles JOIN user con lo que necesita el motor
- oauth_consent: grants (client_id, user_id, scopes)
- assessments: respuestas crudas de cada envío
"""

import json
from datetime import date, datetime, timezone
from typing import AsyncIterator, Optional

import structlog

from identity_matcher.database.supabase_client import get_supabase_client, SupabaseClient
from identity_matcher.errors import NotFound
from identity_matcher.models import (
    AXES,
    Assessment,
    CandidateFilter,
    GeoPoint,
    MatchCandidate,
    Profile,
    User,
)
from identity_matcher.matching.geo import bounding_box

logger = structlog.get_logger()

# PostgREST arma la URL con el filtro `in`; lotes chicos evitan URLs gigantes
SCOPE_CHUNK_SIZE = 100


def _parse_vector(value) -> Optional[list[float]]:
    """pgvector llega como string '[0.1,0.2,...]' vía PostgREST."""
    if value is None:
        return None
    if isinstance(value, str):
        value = json.loads(value)
    return [float(x) for x in value]


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("Fecha de nacimiento inválida", value=value)
        return None


def _row_to_profile(row: dict) -> Profile:
    data = dict(row)
    for axis in AXES:
        key = f"{axis.value}_embedding"
        data[key] = _parse_vector(data.get(key))
    data.pop("id", None)
    return Profile(**data)


def _row_to_candidate(row: dict) -> MatchCandidate:
    location = None
    if row.get("latitude") is not None and row.get("longitude") is not None:
        location = GeoPoint(float(row["latitude"]), float(row["longitude"]))

    return MatchCandidate(
        user_id=row["user_id"],
        embeddings={
            axis: _parse_vector(row.get(f"{axis.value}_embedding")) for axis in AXES
        },
        gender=row.get("gender"),
        birthdate=_parse_date(row.get("birthdate")),
        location=location,
    )


class BaseRepository:
    """Clase base para repositorios."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client


class UserRepository(BaseRepository):
    """Repositorio para los datos demográficos del usuario."""

    TABLE = "user"

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Obtiene un usuario por su ID."""
        rows = await self.client.execute(
            self.client.table(self.TABLE)
            .select("id, gender, birthdate, latitude, longitude, location_updated_at")
            .eq("id", user_id)
            .limit(1)
        )
        return User(**rows[0]) if rows else None

    async def update_location(self, user_id: str, latitude: float, longitude: float) -> User:
        """
        Actualiza la ubicación del usuario.

        Raises:
            ValueError: Si las coordenadas están fuera de rango
            NotFound: Si el usuario no existe
        """
        point = GeoPoint(latitude, longitude)
        rows = await self.client.execute(
            self.client.table(self.TABLE)
            .update({
                "latitude": point.latitude,
                "longitude": point.longitude,
                "location_updated_at": datetime.now(timezone.utc).isoformat(),
            })
            .eq("id", user_id)
        )
        if not rows:
            raise NotFound(user_id=user_id)
        logger.info("Ubicación actualizada", user_id=user_id)
        return User(**rows[0])


class SupabaseProfileStore(BaseRepository):
    """
    Profile Store sobre Supabase.

    `list_candidates` pagina la vista `match_candidates` y aplica en el
    servidor los pre-filtros que PostgREST soporta.
    """

    TABLE = "profiles"
    CANDIDATES_VIEW = "match_candidates"
    CANDIDATE_COLUMNS = ", ".join(
        ["user_id", "gender", "birthdate", "latitude", "longitude"]
        + [f"{axis.value}_embedding" for axis in AXES]
    )

    def __init__(self, client: Optional[SupabaseClient] = None, page_size: int = 200):
        super().__init__(client)
        self.page_size = page_size
        self.users = UserRepository(self._client)

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """Obtiene el perfil de un usuario."""
        rows = await self.client.execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
        )
        return _row_to_profile(rows[0]) if rows else None

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.users.get_by_id(user_id)

    async def save_profile(self, profile: Profile) -> Profile:
        """
        Inserta o reemplaza el perfil del usuario.

        Es un único upsert de fila: los cuatro embeddings se vuelven
        visibles juntos.
        """
        rows = await self.client.execute(
            self.client.table(self.TABLE).upsert(profile.to_db_dict(), on_conflict="user_id")
        )
        logger.info(
            "Perfil upserted",
            user_id=profile.user_id,
            assessment_version=profile.assessment_version,
        )
        return _row_to_profile(rows[0]) if rows else profile

    def _candidate_query(self, candidate_filter: CandidateFilter, scope_chunk: Optional[list[str]]):
        query = (
            self.client.table(self.CANDIDATES_VIEW)
            .select(self.CANDIDATE_COLUMNS)
            .neq("user_id", candidate_filter.exclude_user_id)
        )

        if scope_chunk is not None:
            query = query.in_("user_id", scope_chunk)

        if candidate_filter.genders:
            query = query.in_("gender", sorted(candidate_filter.genders))

        born_after, born_on_or_before = candidate_filter.birthdate_bounds()
        if born_after is not None:
            query = query.gt("birthdate", born_after.isoformat())
        if born_on_or_before is not None:
            query = query.lte("birthdate", born_on_or_before.isoformat())

        if candidate_filter.require_complete:
            for axis in AXES:
                query = query.not_.is_(f"{axis.value}_embedding", "null")

        if (
            candidate_filter.reference_point is not None
            and candidate_filter.max_distance_km is not None
        ):
            min_lat, max_lat, min_lng, max_lng = bounding_box(
                candidate_filter.reference_point, candidate_filter.max_distance_km
            )
            # Sin ubicación no se descarta: la distancia queda sin calcular
            query = query.or_(
                "latitude.is.null,"
                f"and(latitude.gte.{min_lat},latitude.lte.{max_lat},"
                f"longitude.gte.{min_lng},longitude.lte.{max_lng})"
            )

        return query

    async def list_candidates(
        self, candidate_filter: CandidateFilter
    ) -> AsyncIterator[MatchCandidate]:
        """
        Recorre candidatos página por página.

        Es un generador async: si el consumidor deja de iterar, no se
        piden más páginas.
        """
        if candidate_filter.allowed_user_ids is None:
            chunks: list[Optional[list[str]]] = [None]
        else:
            scoped = sorted(candidate_filter.allowed_user_ids)
            chunks = [
                scoped[i:i + SCOPE_CHUNK_SIZE] for i in range(0, len(scoped), SCOPE_CHUNK_SIZE)
            ]

        for chunk in chunks:
            offset = 0
            while True:
                rows = await self.client.execute(
                    self._candidate_query(candidate_filter, chunk)
                    .order("user_id")
                    .range(offset, offset + self.page_size - 1)
                )
                for row in rows:
                    yield _row_to_candidate(row)
                if len(rows) < self.page_size:
                    break
                offset += self.page_size


class ConsentRepository(BaseRepository):
    """Repositorio de grants OAuth (sólo lectura desde el motor)."""

    TABLE = "oauth_consent"

    def __init__(self, client: Optional[SupabaseClient] = None, page_size: int = 1000):
        super().__init__(client)
        self.page_size = page_size

    async def users_for_client(self, client_id: str) -> frozenset[str]:
        """IDs de usuarios que otorgaron acceso al cliente."""
        user_ids: set[str] = set()
        offset = 0
        while True:
            rows = await self.client.execute(
                self.client.table(self.TABLE)
                .select("user_id")
                .eq("client_id", client_id)
                .order("user_id")
                .range(offset, offset + self.page_size - 1)
            )
            user_ids.update(row["user_id"] for row in rows if row.get("user_id"))
            if len(rows) < self.page_size:
                break
            offset += self.page_size

        logger.debug("Consentimientos cargados", client_id=client_id, total=len(user_ids))
        return frozenset(user_ids)


class AssessmentRepository(BaseRepository):
    """Repositorio para assessments enviados."""

    TABLE = "assessments"

    async def create(self, assessment: Assessment) -> Assessment:
        """Registra un assessment."""
        rows = await self.client.execute(
            self.client.table(self.TABLE).insert(assessment.to_db_dict())
        )
        logger.info(
            "Assessment registrado",
            user_id=assessment.user_id,
            assessment_name=assessment.assessment_name,
        )
        return Assessment(**rows[0]) if rows else assessment

    async def get_latest_for_user(self, user_id: str) -> Optional[Assessment]:
        """Obtiene el último assessment de un usuario."""
        rows = await self.client.execute(
            self.client.table(self.TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("completed_at", desc=True)
            .limit(1)
        )
        return Assessment(**rows[0]) if rows else None
