"""
Abstracciones de los colaboradores del motor.

El motor y el servicio de assessment dependen de estos protocolos, no de
Supabase ni de Gemini. Los tests usan implementaciones en memoria.
"""

from typing import AsyncIterator, Optional, Protocol

from identity_matcher.models import (
    Assessment,
    CandidateFilter,
    MatchCandidate,
    Profile,
    User,
)


class Embedder(Protocol):
    async def embed(self, text: str) -> list[float]: ...

    async def embed_batch(self, texts: list[str]) -> list[list[float]]: ...


class ProfileStore(Protocol):
    async def get_profile(self, user_id: str) -> Optional[Profile]: ...

    async def get_user(self, user_id: str) -> Optional[User]: ...

    def list_candidates(
        self, candidate_filter: CandidateFilter
    ) -> AsyncIterator[MatchCandidate]: ...

    async def save_profile(self, profile: Profile) -> Profile: ...


class ConsentIndex(Protocol):
    async def users_for_client(self, client_id: str) -> frozenset[str]: ...


class AssessmentStore(Protocol):
    async def create(self, assessment: Assessment) -> Assessment: ...

    async def get_latest_for_user(self, user_id: str) -> Optional[Assessment]: ...
