"""
Assessment: banco de preguntas, assembler y camino de escritura.
"""

from identity_matcher.assessment.assembler import assemble_profile, assemble_section
from identity_matcher.assessment.questions import (
    QUESTIONS,
    SECTIONS,
    ClosedQuestion,
    OpenQuestion,
    list_sections,
)
from identity_matcher.assessment.service import AssessmentService, validate_answers

__all__ = [
    # Assembler
    "assemble_profile",
    "assemble_section",
    # Preguntas
    "QUESTIONS",
    "SECTIONS",
    "ClosedQuestion",
    "OpenQuestion",
    "list_sections",
    # Servicio
    "AssessmentService",
    "validate_answers",
]
