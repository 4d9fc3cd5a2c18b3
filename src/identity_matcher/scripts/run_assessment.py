"""
Script para procesar un assessment y regenerar el perfil de un usuario.

Uso:
    python -m identity_matcher.scripts.run_assessment --user-id <id> --answers answers.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog

from identity_matcher.assessment import AssessmentService
from identity_matcher.config import get_settings
from identity_matcher.database import AssessmentRepository, SupabaseProfileStore
from identity_matcher.embeddings import EmbeddingGateway
from identity_matcher.errors import MatcherError
from identity_matcher.scripts.logging_setup import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

logger = structlog.get_logger()


async def run_assessment(user_id: str, answers: dict) -> dict:
    """Ejecuta el camino de escritura completo."""
    profile_store = SupabaseProfileStore()
    service = AssessmentService(
        embedder=EmbeddingGateway(),
        profile_store=profile_store,
        assessment_store=AssessmentRepository(profile_store.client),
    )
    result = await service.submit(user_id, answers)
    return result.model_dump()


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Procesa un assessment")
    parser.add_argument("--user-id", required=True, help="Usuario dueño del assessment")
    parser.add_argument(
        "--answers",
        required=True,
        type=Path,
        help="Archivo JSON con {question_id: valor}",
    )

    args = parser.parse_args()

    try:
        answers = json.loads(args.answers.read_text(encoding="utf-8"))
        result = asyncio.run(run_assessment(args.user_id, answers))
        print(json.dumps(result))
        sys.exit(0)
    except MatcherError as e:
        logger.error("Assessment rechazado", code=e.code, error=str(e))
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Assessment interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal procesando assessment", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
