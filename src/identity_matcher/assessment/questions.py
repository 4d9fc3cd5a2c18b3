"""
Banco de preguntas del assessment.

Cada sección corresponde a un eje de matching. El orden de las preguntas
dentro de una sección es fijo: el assembler lo recorre tal cual, así que
reordenar cambia el texto generado (y por ende los embeddings).

Las oraciones no llevan punto final; el assembler las une con ". ".
"""

from dataclasses import dataclass, field
from typing import Union

from identity_matcher.models.profile import AXES, Axis

ANSWER_PLACEHOLDER = "{answer}"


@dataclass(frozen=True)
class ClosedQuestion:
    """Pregunta de escala 1-5; cada valor elige una oración pre-escrita."""

    id: str
    text: str
    options: tuple[str, str, str, str, str]
    scale_labels: tuple[str, str]
    type: str = field(default="closed", init=False)


@dataclass(frozen=True)
class OpenQuestion:
    """Pregunta abierta; la respuesta se inserta en `template`."""

    id: str
    text: str
    template: str
    placeholder: str = ""
    type: str = field(default="open", init=False)


Question = Union[ClosedQuestion, OpenQuestion]


QUESTIONS: dict[Axis, tuple[Question, ...]] = {
    Axis.PSYCHOLOGICAL: (
        ClosedQuestion(
            id="psy_social_energy",
            text="¿Cómo recargás energía después de una semana intensa?",
            options=(
                "Recupero energía en soledad y evito los planes sociales",
                "Prefiero la tranquilidad y pocos encuentros con gente cercana",
                "Alterno momentos a solas con salidas sociales",
                "Disfruto de juntarme con amigos para recargar energía",
                "Me recargo rodeándome de gente y planes sociales constantes",
            ),
            scale_labels=("Solo/a", "Con gente"),
        ),
        ClosedQuestion(
            id="psy_emotional_stability",
            text="¿Cómo reaccionás ante imprevistos?",
            options=(
                "Los imprevistos me generan mucha ansiedad",
                "Me cuesta adaptarme cuando cambian los planes",
                "Según el día, los imprevistos me afectan más o menos",
                "Suelo mantener la calma ante los cambios",
                "Me mantengo sereno/a incluso en situaciones de mucha presión",
            ),
            scale_labels=("Me alteran", "Me mantengo en calma"),
        ),
        ClosedQuestion(
            id="psy_openness",
            text="¿Qué tan seguido buscás experiencias nuevas?",
            options=(
                "Prefiero lo conocido y las rutinas estables",
                "Me animo a lo nuevo de vez en cuando",
                "Equilibro lo conocido con algo de novedad",
                "Busco experiencias nuevas con frecuencia",
                "Necesito novedad constante y me aburre la rutina",
            ),
            scale_labels=("Rutina", "Novedad"),
        ),
        ClosedQuestion(
            id="psy_empathy",
            text="¿Cuánto te afectan las emociones de los demás?",
            options=(
                "Me cuesta registrar lo que sienten los demás",
                "Percibo las emociones ajenas pero mantengo distancia",
                "Me involucro emocionalmente según la persona",
                "Soy muy sensible a lo que sienten quienes me rodean",
                "Vivo las emociones de los demás como propias",
            ),
            scale_labels=("Poco", "Muchísimo"),
        ),
        OpenQuestion(
            id="psy_self_description",
            text="Describite en pocas palabras",
            template="Me describo como una persona {answer}",
            placeholder="curiosa, tranquila, intensa...",
        ),
    ),
    Axis.VALUES: (
        ClosedQuestion(
            id="val_family",
            text="¿Qué lugar ocupa la familia en tu vida?",
            options=(
                "La familia tiene un rol secundario en mi vida",
                "Valoro a mi familia pero priorizo mi independencia",
                "Busco un equilibrio entre familia e independencia",
                "La familia es una de mis prioridades",
                "La familia es el centro de mi vida",
            ),
            scale_labels=("Secundario", "Central"),
        ),
        ClosedQuestion(
            id="val_ambition",
            text="¿Qué tan importante es para vos el crecimiento profesional?",
            options=(
                "El trabajo es sólo un medio y no me interesa crecer profesionalmente",
                "Prefiero estabilidad antes que crecimiento profesional",
                "Me interesa crecer profesionalmente sin que domine mi vida",
                "Soy ambicioso/a y trabajo para crecer profesionalmente",
                "Mi carrera es una prioridad absoluta",
            ),
            scale_labels=("Nada", "Muy importante"),
        ),
        ClosedQuestion(
            id="val_tradition",
            text="¿Cómo te relacionás con las tradiciones?",
            options=(
                "Cuestiono las tradiciones y prefiero romper con ellas",
                "Las tradiciones me resultan poco relevantes",
                "Conservo algunas tradiciones y descarto otras",
                "Valoro y mantengo las tradiciones",
                "Las tradiciones guían gran parte de mis decisiones",
            ),
            scale_labels=("Las cuestiono", "Me guían"),
        ),
        OpenQuestion(
            id="val_core",
            text="¿Qué valor no negociarías nunca?",
            template="Nunca negociaría {answer}",
            placeholder="la honestidad, la libertad...",
        ),
    ),
    Axis.INTERESTS: (
        ClosedQuestion(
            id="int_outdoors",
            text="¿Cuánto disfrutás de actividades al aire libre?",
            options=(
                "Prefiero quedarme en casa antes que salir al aire libre",
                "Salgo al aire libre sólo de vez en cuando",
                "Disfruto de algunas actividades al aire libre",
                "Me encantan las actividades al aire libre",
                "Paso todo el tiempo posible en la naturaleza",
            ),
            scale_labels=("Casa", "Naturaleza"),
        ),
        ClosedQuestion(
            id="int_culture",
            text="¿Qué tan presentes están el arte y la cultura en tu tiempo libre?",
            options=(
                "El arte y la cultura no forman parte de mi tiempo libre",
                "Consumo cultura de forma ocasional",
                "Disfruto de la cultura cuando se da la oportunidad",
                "Busco activamente muestras, recitales y obras",
                "El arte y la cultura son mi pasión principal",
            ),
            scale_labels=("Ausentes", "Muy presentes"),
        ),
        ClosedQuestion(
            id="int_sports",
            text="¿Qué tan activo/a sos físicamente?",
            options=(
                "No practico ningún deporte",
                "Hago actividad física de forma esporádica",
                "Me mantengo activo/a algunas veces por semana",
                "Entreno con regularidad y disfruto del deporte",
                "El deporte es una parte central de mi identidad",
            ),
            scale_labels=("Sedentario/a", "Muy activo/a"),
        ),
        OpenQuestion(
            id="int_hobbies",
            text="¿Qué te gusta hacer en tu tiempo libre?",
            template="En mi tiempo libre me gusta {answer}",
            placeholder="leer, cocinar, viajar...",
        ),
    ),
    Axis.BEHAVIORAL: (
        ClosedQuestion(
            id="beh_planning",
            text="¿Planificás o improvisás?",
            options=(
                "Improviso todo y evito los planes",
                "Prefiero improvisar aunque a veces planifico",
                "Planifico lo importante e improviso el resto",
                "Me gusta tener las cosas organizadas de antemano",
                "Planifico cada detalle y me incomoda improvisar",
            ),
            scale_labels=("Improviso", "Planifico"),
        ),
        ClosedQuestion(
            id="beh_conflict",
            text="¿Cómo manejás los conflictos?",
            options=(
                "Evito los conflictos a toda costa",
                "Me cuesta hablar de los conflictos y a veces los postergo",
                "Hablo de los conflictos cuando ya no se pueden evitar",
                "Prefiero hablar los conflictos de forma directa",
                "Enfrento los conflictos de inmediato y sin rodeos",
            ),
            scale_labels=("Los evito", "Los enfrento"),
        ),
        ClosedQuestion(
            id="beh_routine",
            text="¿Cómo es tu ritmo diario?",
            options=(
                "Soy muy nocturno/a y mis horarios son irregulares",
                "Tiendo a ser nocturno/a",
                "Mis horarios se adaptan a cada semana",
                "Tiendo a ser madrugador/a",
                "Soy muy madrugador/a y sigo horarios estrictos",
            ),
            scale_labels=("Nocturno/a", "Madrugador/a"),
        ),
        OpenQuestion(
            id="beh_weekend",
            text="¿Cómo es tu fin de semana ideal?",
            template="Mi fin de semana ideal es {answer}",
            placeholder="una escapada, una maratón de series...",
        ),
    ),
}

SECTIONS: tuple[Axis, ...] = AXES


def all_question_ids() -> set[str]:
    """IDs de todas las preguntas del cuestionario."""
    return {question.id for section in SECTIONS for question in QUESTIONS[section]}


def list_sections() -> list[dict]:
    """
    Definición pública del cuestionario, sección por sección.

    Returns:
        Lista de {section, questions}; los campos que no aplican a un
        tipo de pregunta vienen en None.
    """
    sections = []
    for section in SECTIONS:
        questions = []
        for question in QUESTIONS[section]:
            is_closed = isinstance(question, ClosedQuestion)
            questions.append({
                "id": question.id,
                "type": question.type,
                "text": question.text,
                "options": list(question.options) if is_closed else None,
                "scale_labels": list(question.scale_labels) if is_closed else None,
                "template": None if is_closed else question.template,
                "placeholder": None if is_closed else question.placeholder,
            })
        sections.append({"section": section.value, "questions": questions})
    return sections
