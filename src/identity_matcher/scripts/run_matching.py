"""
Script para consultar matches de un usuario.

Imprime los resultados como JSON por stdout.

Uso:
    python -m identity_matcher.scripts.run_matching --user-id <id>
    python -m identity_matcher.scripts.run_matching --user-id <id> --client-id idm_demo_client \
        --limit 20 --gender woman man --min-age 25 --max-age 40 --max-distance 50
"""

import argparse
import asyncio
import json
import sys

import structlog

from identity_matcher.config import get_settings
from identity_matcher.database import ConsentRepository, SupabaseProfileStore
from identity_matcher.errors import MatcherError
from identity_matcher.matching import MatchingEngine
from identity_matcher.scripts.logging_setup import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

logger = structlog.get_logger()


async def run_matching(args: argparse.Namespace) -> list[dict]:
    """Arma el motor sobre Supabase y ejecuta una consulta."""
    profile_store = SupabaseProfileStore(page_size=settings.candidate_page_size)
    consent_index = ConsentRepository(profile_store.client)
    engine = MatchingEngine(profile_store, consent_index)

    matches = await engine.find_matches(
        seed_user_id=args.user_id,
        client_id=args.client_id,
        limit=args.limit,
        gender=args.gender,
        min_age=args.min_age,
        max_age=args.max_age,
        max_distance_km=args.max_distance,
        weights=json.loads(args.weights) if args.weights else None,
    )
    return [match.to_dict() for match in matches]


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Busca matches para un usuario")
    parser.add_argument("--user-id", required=True, help="Usuario semilla")
    parser.add_argument("--client-id", default=None, help="Cliente OAuth para el scope")
    parser.add_argument("--limit", type=int, default=None, help="Máximo de resultados")
    parser.add_argument("--gender", nargs="+", default=None, help="Géneros aceptados")
    parser.add_argument("--min-age", type=int, default=None, help="Edad mínima")
    parser.add_argument("--max-age", type=int, default=None, help="Edad máxima")
    parser.add_argument("--max-distance", type=float, default=None, help="Distancia máxima (km)")
    parser.add_argument(
        "--weights",
        default=None,
        help='Pesos custom en JSON, ej: \'{"psychological": 1, "values": 1, "interests": 1, "behavioral": 1}\'',
    )

    args = parser.parse_args()

    try:
        results = asyncio.run(run_matching(args))
        print(json.dumps(results, ensure_ascii=False, indent=2))
        sys.exit(0)
    except MatcherError as e:
        logger.error("Consulta rechazada", code=e.code, error=str(e))
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Matching interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal en matching", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
