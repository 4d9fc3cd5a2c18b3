"""
Backend en memoria.

Implementa los mismos contratos que los repositorios de Supabase. Sirve
para correr el motor localmente y en tests.
"""

from datetime import date, datetime, timezone
from typing import AsyncIterator, Optional

from identity_matcher.errors import NotFound
from identity_matcher.models import (
    Assessment,
    CandidateFilter,
    ConsentGrant,
    GeoPoint,
    MatchCandidate,
    Profile,
    User,
    AXES,
)


class InMemoryStore:
    """
    Profile Store, Consent Index y Assessment Store en diccionarios.

    Los perfiles son inmutables y se reemplazan con una sola asignación,
    así que un lector nunca ve un perfil a medio actualizar.
    """

    def __init__(self):
        self._users: dict[str, User] = {}
        self._profiles: dict[str, Profile] = {}
        self._grants: dict[tuple[str, str], ConsentGrant] = {}
        self._assessments: dict[str, list[Assessment]] = {}

    # Usuarios

    def add_user(
        self,
        user_id: str,
        gender: Optional[str] = None,
        birthdate: Optional[date] = None,
        location: Optional[GeoPoint] = None,
    ) -> User:
        user = User(
            id=user_id,
            gender=gender,
            birthdate=birthdate,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
        )
        self._users[user_id] = user
        return user

    async def update_location(self, user_id: str, latitude: float, longitude: float) -> User:
        if user_id not in self._users:
            raise NotFound(user_id=user_id)
        point = GeoPoint(latitude, longitude)
        user = self._users[user_id].model_copy(update={
            "latitude": point.latitude,
            "longitude": point.longitude,
            "location_updated_at": datetime.now(timezone.utc).isoformat(),
        })
        self._users[user_id] = user
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    # Perfiles

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        return self._profiles.get(user_id)

    async def save_profile(self, profile: Profile) -> Profile:
        self._profiles[profile.user_id] = profile
        return profile

    async def list_candidates(
        self, candidate_filter: CandidateFilter
    ) -> AsyncIterator[MatchCandidate]:
        # Snapshot: un upsert concurrente no altera este recorrido
        snapshot = sorted(self._profiles.values(), key=lambda p: p.user_id)
        for profile in snapshot:
            user = self._users.get(profile.user_id)
            candidate = MatchCandidate(
                user_id=profile.user_id,
                embeddings={axis: profile.embedding_for(axis) for axis in AXES},
                gender=user.gender if user else None,
                birthdate=user.birthdate if user else None,
                location=user.location if user else None,
            )
            if candidate_filter.accepts(candidate):
                yield candidate

    # Consentimientos

    def grant_consent(self, client_id: str, user_id: str, scopes: Optional[list[str]] = None) -> ConsentGrant:
        grant = ConsentGrant(client_id=client_id, user_id=user_id, scopes=scopes or ["openid"])
        self._grants[(client_id, user_id)] = grant
        return grant

    def revoke_consent(self, client_id: str, user_id: str) -> None:
        self._grants.pop((client_id, user_id), None)

    async def users_for_client(self, client_id: str) -> frozenset[str]:
        return frozenset(user_id for (cid, user_id) in self._grants if cid == client_id)

    # Assessments

    async def create(self, assessment: Assessment) -> Assessment:
        self._assessments.setdefault(assessment.user_id, []).append(assessment)
        return assessment

    async def get_latest_for_user(self, user_id: str) -> Optional[Assessment]:
        history = self._assessments.get(user_id)
        return history[-1] if history else None
