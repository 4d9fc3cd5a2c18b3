import asyncio
import random
from datetime import date

import pytest

from conftest import TODAY, profile_with_similarities
from identity_matcher.errors import (
    InvalidQuery,
    InvalidWeights,
    LocationRequired,
    NotFound,
    ProfileIncomplete,
)
from identity_matcher.matching import MatchingEngine
from identity_matcher.matching.scoring import DEFAULT_WEIGHTS
from identity_matcher.models import AXES, Axis, GeoPoint, MatchCandidate

BUENOS_AIRES = GeoPoint(-34.6037, -58.3816)
LA_PLATA = GeoPoint(-34.9214, -57.9544)  # ~55 km
ROSARIO = GeoPoint(-32.9442, -60.6505)  # ~280 km


class UntouchableStore:
    """Falla si el motor accede a storage."""

    async def get_user(self, user_id):
        raise AssertionError("no debería leer storage")

    async def get_profile(self, user_id):
        raise AssertionError("no debería leer storage")

    async def users_for_client(self, client_id):
        raise AssertionError("no debería leer storage")

    def list_candidates(self, candidate_filter):
        raise AssertionError("no debería leer storage")


class LeakyStore:
    """Delega en el store real pero ignora el filtro al listar candidatos."""

    def __init__(self, inner, extra=()):
        self.inner = inner
        self.extra = list(extra)
        self.closed = False
        self.yielded = 0

    async def get_user(self, user_id):
        return await self.inner.get_user(user_id)

    async def get_profile(self, user_id):
        return await self.inner.get_profile(user_id)

    async def users_for_client(self, client_id):
        return await self.inner.users_for_client(client_id)

    async def list_candidates(self, candidate_filter):
        try:
            for profile in sorted(self.inner._profiles.values(), key=lambda p: p.user_id):
                user = self.inner._users.get(profile.user_id)
                self.yielded += 1
                yield MatchCandidate(
                    user_id=profile.user_id,
                    embeddings={axis: profile.embedding_for(axis) for axis in AXES},
                    gender=user.gender if user else None,
                    birthdate=user.birthdate if user else None,
                    location=user.location if user else None,
                )
            for candidate in self.extra:
                self.yielded += 1
                yield candidate
        finally:
            self.closed = True


async def test_reference_scenario(engine, seed, add_candidate):
    add_candidate("c", {
        Axis.PSYCHOLOGICAL: 0.9,
        Axis.VALUES: 0.6,
        Axis.INTERESTS: 0.3,
        Axis.BEHAVIORAL: 0.1,
    })

    [match] = await engine.find_matches(seed)

    assert match.user_id == "c"
    assert match.score == pytest.approx(0.625, abs=1e-9)
    assert match.breakdown[Axis.PSYCHOLOGICAL] == pytest.approx(0.9)
    assert match.breakdown[Axis.VALUES] == pytest.approx(0.6)
    assert match.breakdown[Axis.INTERESTS] == pytest.approx(0.3)
    assert match.breakdown[Axis.BEHAVIORAL] == pytest.approx(0.1)
    assert match.distance_km is None


async def test_results_sorted_by_score_then_user_id(engine, seed, add_candidate):
    add_candidate("d", 0.4)
    add_candidate("b", 0.8)
    add_candidate("a", 0.8)
    add_candidate("c", 0.9)

    matches = await engine.find_matches(seed)

    assert [m.user_id for m in matches] == ["c", "a", "b", "d"]


async def test_scores_equal_weighted_cosines_for_random_pool(store, seed, add_candidate):
    rng = random.Random(7)
    expected = {}
    for i in range(60):
        sims = {axis: rng.uniform(-1.0, 1.0) for axis in AXES}
        add_candidate(f"u{i:02d}", sims)
        expected[f"u{i:02d}"] = sum(DEFAULT_WEIGHTS[axis] * sims[axis] for axis in AXES)

    engine = MatchingEngine(store, store, max_limit=100, today=lambda: TODAY)
    matches = await engine.find_matches(seed, limit=100)

    assert len(matches) == 60
    for match in matches:
        assert match.score == pytest.approx(expected[match.user_id], abs=1e-9)
    keys = [(-m.score, m.user_id) for m in matches]
    assert keys == sorted(keys)


async def test_limit_keeps_best_results(engine, seed, add_candidate):
    for i in range(20):
        add_candidate(f"u{i:02d}", i / 20)

    matches = await engine.find_matches(seed, limit=3)

    assert [m.user_id for m in matches] == ["u19", "u18", "u17"]


async def test_custom_weights_are_renormalized(engine, seed, add_candidate):
    add_candidate("c", {
        Axis.PSYCHOLOGICAL: 0.8,
        Axis.VALUES: 0.4,
        Axis.INTERESTS: 0.2,
        Axis.BEHAVIORAL: 0.0,
    })

    [match] = await engine.find_matches(
        seed, weights={"psychological": 1, "values": 1, "interests": 1, "behavioral": 1}
    )

    assert match.score == pytest.approx(0.35, abs=1e-9)


async def test_negative_similarity_is_not_clamped(engine, seed, add_candidate):
    add_candidate("c", {
        Axis.PSYCHOLOGICAL: 1.0,
        Axis.VALUES: -1.0,
        Axis.INTERESTS: 1.0,
        Axis.BEHAVIORAL: 1.0,
    })

    [match] = await engine.find_matches(seed)

    assert match.breakdown[Axis.VALUES] == pytest.approx(-1.0)
    assert match.score == pytest.approx(0.5)


async def test_candidate_missing_an_axis_never_appears(store, seed, add_candidate):
    add_candidate("complete", 0.1)
    add_candidate("partial", {
        Axis.PSYCHOLOGICAL: 1.0,
        Axis.VALUES: 1.0,
        Axis.INTERESTS: 1.0,
        Axis.BEHAVIORAL: None,
    })
    leaky = LeakyStore(store)
    engine = MatchingEngine(leaky, leaky, today=lambda: TODAY)

    matches = await engine.find_matches(seed, gender=None)

    assert [m.user_id for m in matches] == ["complete"]


async def test_seed_user_missing_raises_not_found(engine):
    with pytest.raises(NotFound):
        await engine.find_matches("ghost")


async def test_seed_without_profile_is_incomplete(engine, store):
    store.add_user("fresh")
    with pytest.raises(ProfileIncomplete):
        await engine.find_matches("fresh")


async def test_seed_with_partial_profile_is_incomplete(engine, store):
    store.add_user("half")
    store._profiles["half"] = profile_with_similarities("half", {Axis.PSYCHOLOGICAL: 1.0})
    with pytest.raises(ProfileIncomplete):
        await engine.find_matches("half")


async def test_invalid_weights_fail_before_storage_access():
    engine = MatchingEngine(UntouchableStore(), UntouchableStore(), today=lambda: TODAY)
    with pytest.raises(InvalidWeights):
        await engine.find_matches("seed", weights={"psychological": 1.0})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0},
        {"limit": 101},
        {"min_age": 40, "max_age": 30},
        {"min_age": -1},
        {"max_distance_km": -5.0},
    ],
)
async def test_invalid_query_fails_before_storage_access(kwargs):
    engine = MatchingEngine(UntouchableStore(), UntouchableStore(), max_limit=100, today=lambda: TODAY)
    with pytest.raises(InvalidQuery):
        await engine.find_matches("seed", **kwargs)


async def test_distance_filter_without_seed_location_fails(engine, seed, add_candidate):
    add_candidate("near", 0.9, location=BUENOS_AIRES)
    with pytest.raises(LocationRequired):
        await engine.find_matches(seed, max_distance_km=50)


async def test_distance_filter_fails_even_with_empty_pool(engine, seed):
    with pytest.raises(LocationRequired):
        await engine.find_matches(seed, max_distance_km=10)


async def test_distance_is_a_hard_filter(store, engine, add_candidate):
    store.add_user("seed", location=BUENOS_AIRES)
    store._profiles["seed"] = profile_with_similarities("seed", {axis: 1.0 for axis in AXES})
    add_candidate("near", 0.2, location=LA_PLATA)
    add_candidate("far", 0.9, location=ROSARIO)
    add_candidate("nowhere", 0.5, location=None)

    matches = await engine.find_matches("seed", max_distance_km=100)

    assert [m.user_id for m in matches] == ["nowhere", "near"]
    by_id = {m.user_id: m for m in matches}
    assert by_id["near"].distance_km == pytest.approx(55, abs=5)
    assert by_id["nowhere"].distance_km is None
    # El score no se penaliza por distancia
    assert by_id["near"].score == pytest.approx(0.2)


async def test_distance_reported_without_filter(store, engine, add_candidate):
    store.add_user("seed", location=BUENOS_AIRES)
    store._profiles["seed"] = profile_with_similarities("seed", {axis: 1.0 for axis in AXES})
    add_candidate("far", 0.9, location=ROSARIO)

    [match] = await engine.find_matches("seed")

    assert match.distance_km == pytest.approx(280, abs=15)


async def test_empty_pool_after_gender_filter(engine, seed, add_candidate):
    add_candidate("c1", 0.9, gender="woman")
    add_candidate("c2", 0.8, gender="woman")

    assert await engine.find_matches(seed, gender=["nonbinary"]) == []


async def test_gender_and_age_filters(engine, seed, add_candidate):
    add_candidate("young", 0.9, gender="woman", birthdate=date(2004, 1, 1))  # 22
    add_candidate("match", 0.5, gender="woman", birthdate=date(1996, 1, 1))  # 30
    add_candidate("man", 0.9, gender="man", birthdate=date(1996, 1, 1))

    matches = await engine.find_matches(seed, gender=["woman"], min_age=25, max_age=35)

    assert [m.user_id for m in matches] == ["match"]


async def test_empty_gender_list_does_not_filter(engine, seed, add_candidate):
    add_candidate("c1", 0.9, gender="woman")
    add_candidate("c2", 0.8, gender="man")

    assert len(await engine.find_matches(seed, gender=[])) == 2


async def test_seed_is_never_its_own_match(engine, seed, add_candidate):
    add_candidate("c1", 0.1)
    matches = await engine.find_matches(seed)
    assert seed not in [m.user_id for m in matches]


async def test_consent_scopes_candidate_pool(store, engine, seed, add_candidate):
    for user_id in ("u1", "u2", "u3"):
        add_candidate(user_id, 0.5)
    store.grant_consent("client-a", "u1")
    store.grant_consent("client-a", "u2")
    store.grant_consent("client-b", "u3")

    matches_a = await engine.find_matches(seed, client_id="client-a")
    matches_b = await engine.find_matches(seed, client_id="client-b")

    assert {m.user_id for m in matches_a} == {"u1", "u2"}
    assert {m.user_id for m in matches_b} == {"u3"}


async def test_consent_enforced_even_if_store_ignores_scope(store, seed, add_candidate):
    for user_id in ("u1", "u2", "u3"):
        add_candidate(user_id, 0.5)
    store.grant_consent("client-a", "u1")
    store.grant_consent("client-a", "u2")
    store.grant_consent("client-b", "u3")
    leaky = LeakyStore(store)
    engine = MatchingEngine(leaky, leaky, today=lambda: TODAY)

    matches = await engine.find_matches(seed, client_id="client-a")

    assert "u3" not in {m.user_id for m in matches}


async def test_client_without_consents_gets_empty_list(engine, seed, add_candidate):
    add_candidate("u1", 0.9)
    assert await engine.find_matches(seed, client_id="client-nobody") == []


async def test_no_client_means_unscoped(engine, seed, add_candidate):
    add_candidate("u1", 0.9)
    add_candidate("u2", 0.8)
    assert len(await engine.find_matches(seed)) == 2


async def test_scan_cap_stops_and_closes_stream(store, seed, add_candidate):
    for i in range(10):
        add_candidate(f"u{i}", 0.5)
    leaky = LeakyStore(store)
    engine = MatchingEngine(leaky, leaky, scan_cap=3, today=lambda: TODAY)

    await engine.find_matches(seed)

    assert leaky.closed
    assert leaky.yielded <= 4  # seed + 3 evaluados como máximo


async def test_mismatched_dimension_candidate_is_skipped(store, seed, add_candidate):
    add_candidate("ok", 0.5)
    odd = MatchCandidate(
        user_id="odd",
        embeddings={axis: [1.0, 0.0, 0.0] for axis in AXES},
        gender="woman",
        birthdate=date(1995, 1, 1),
    )
    leaky = LeakyStore(store, extra=[odd])
    engine = MatchingEngine(leaky, leaky, today=lambda: TODAY)

    matches = await engine.find_matches(seed)

    assert [m.user_id for m in matches] == ["ok"]


async def test_concurrent_queries_are_independent(engine, seed, add_candidate):
    for i in range(15):
        add_candidate(f"u{i:02d}", (i % 7) / 7)

    results = await asyncio.gather(*(engine.find_matches(seed, limit=5) for _ in range(8)))

    first = [m.to_dict() for m in results[0]]
    assert all([m.to_dict() for m in r] == first for r in results)


async def test_single_gender_string_is_one_gender(engine, seed, add_candidate):
    add_candidate("w", 0.9, gender="woman")
    add_candidate("m", 0.8, gender="man")

    matches = await engine.find_matches(seed, gender="woman")

    assert [m.user_id for m in matches] == ["w"]
