"""
Assembler: respuestas crudas del assessment -> cuatro descripciones por eje.

- Preguntas cerradas: el valor 1-5 elige una de las cinco oraciones
  pre-escritas. Si la respuesta ya es una de esas oraciones, se usa tal cual.
- Preguntas abiertas: el texto (sin espacios sobrantes) se inserta en la
  plantilla de la pregunta.
- Respuestas faltantes se saltean sin error.

Función pura: mismas respuestas, mismo texto.
"""

from typing import Mapping, Optional

from identity_matcher.assessment.questions import (
    ANSWER_PLACEHOLDER,
    QUESTIONS,
    ClosedQuestion,
    OpenQuestion,
    Question,
)
from identity_matcher.models import AnswerValue, Axis, ProfileText


def _closed_sentence(question: ClosedQuestion, answer: AnswerValue) -> Optional[str]:
    # bool es subclase de int, pero no es una respuesta de escala
    if isinstance(answer, int) and not isinstance(answer, bool):
        index = max(0, min(4, answer - 1))
        return question.options[index]
    if isinstance(answer, str) and answer in question.options:
        return answer
    return None


def _open_sentence(question: OpenQuestion, answer: AnswerValue) -> Optional[str]:
    if not isinstance(answer, str):
        return None
    text = answer.strip()
    if not text:
        return None
    return question.template.replace(ANSWER_PLACEHOLDER, text, 1)


def _sentence_for(question: Question, answer: AnswerValue) -> Optional[str]:
    if isinstance(question, ClosedQuestion):
        return _closed_sentence(question, answer)
    return _open_sentence(question, answer)


def assemble_section(section: Axis, answers: Mapping[str, AnswerValue]) -> str:
    """
    Arma la descripción de un eje.

    Las oraciones se unen con ". " y siempre se cierra con punto, por lo
    que un eje sin respuestas queda como ".".
    """
    sentences = []
    for question in QUESTIONS[section]:
        if question.id not in answers:
            continue
        sentence = _sentence_for(question, answers[question.id])
        if sentence:
            sentences.append(sentence)

    return ". ".join(sentences) + "."


def assemble_profile(answers: Mapping[str, AnswerValue]) -> ProfileText:
    """Arma las cuatro descripciones a partir de todas las respuestas."""
    return ProfileText(
        psychological=assemble_section(Axis.PSYCHOLOGICAL, answers),
        values=assemble_section(Axis.VALUES, answers),
        interests=assemble_section(Axis.INTERESTS, answers),
        behavioral=assemble_section(Axis.BEHAVIORAL, answers),
    )
