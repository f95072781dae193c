"""Prompt construction for interview reviews.

Given the interview transcript and what we know about the role, we emit:
* A system prompt describing the recruiter persona.
* A user prompt with the input data, analysis instructions and the output
  template the model must follow.

The prompt has two shapes, picked by :class:`EvaluationMode`: when the
interview type defines competencies the model classifies each one against a
fixed scale; otherwise the analysis leans on the company values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

NOT_INFORMED = "Não informado"

# Ordinal scale used for every competency, lowest first.
COMPETENCY_LEVELS: tuple[str, ...] = (
    "Abaixo do esperado",
    "Atende parcialmente",
    "Atende",
    "Supera",
)
INSUFFICIENT_EVIDENCE = "Evidência insuficiente"

TEMPLATE_HEADER = "#TEMPLATE DO OUTPUT"

SYSTEM_PROMPT = (
    "Você é um especialista de recrutamento e seleção. Gera pareceres estruturados, "
    "objetivos e imparciais sobre candidatos com base exclusivamente nas entrevistas. "
    "Nunca invente dados: tudo deve estar na transcrição ou nos dados fornecidos."
)


class EvaluationMode(str, Enum):
    WITH_COMPETENCY_SCHEMA = "with_competency_schema"
    VALUES_ONLY = "values_only"


@dataclass(frozen=True)
class CompetencyRubric:
    name: str
    description: str | None = None
    below_expected: str | None = None
    partially_meets: str | None = None
    meets: str | None = None
    exceeds: str | None = None

    def level_descriptions(self) -> tuple[tuple[str, str | None], ...]:
        return tuple(
            zip(
                COMPETENCY_LEVELS,
                (self.below_expected, self.partially_meets, self.meets, self.exceeds),
            )
        )


@dataclass(frozen=True)
class ReviewContext:
    transcript: str
    job_name: str | None = None
    job_description: str | None = None
    job_responsibilities: str | None = None
    interview_roadmap: str | None = None
    notes: str | None = None
    company_values: str | None = None
    competencies: Sequence[CompetencyRubric] = field(default_factory=tuple)

    @property
    def mode(self) -> EvaluationMode:
        if any(rubric.name.strip() for rubric in self.competencies):
            return EvaluationMode.WITH_COMPETENCY_SCHEMA
        return EvaluationMode.VALUES_ONLY


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str
    mode: EvaluationMode


def _or_default(value: str | None) -> str:
    if value is None or not str(value).strip():
        return NOT_INFORMED
    return str(value).strip()


def _bullet_slots(limit: int) -> str:
    return "\n".join(f"- [item {index}]" for index in range(1, limit + 1))


def _active_competencies(context: ReviewContext) -> list[CompetencyRubric]:
    return [rubric for rubric in context.competencies if rubric.name.strip()]


def _format_rubrics(competencies: Sequence[CompetencyRubric]) -> str:
    blocks: list[str] = []
    for index, rubric in enumerate(competencies, start=1):
        lines = [f"{index}. {rubric.name.strip()}"]
        lines.append(f"   Descrição: {_or_default(rubric.description)}")
        for label, text in rubric.level_descriptions():
            lines.append(f"   - {label}: {_or_default(text)}")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


def _input_section(context: ReviewContext, mode: EvaluationMode) -> str:
    sections = [
        "#DADOS DE ENTRADA:",
        f"**Nome da vaga**:\n{_or_default(context.job_name)}",
        f"**Transcrição da entrevista**:\n{_or_default(context.transcript)}",
        f"**Roteiro da entrevista**:\n{_or_default(context.interview_roadmap)}",
        f"**Descrição da vaga**:\n{_or_default(context.job_description)}",
        f"**Escopo da função**:\n{_or_default(context.job_responsibilities)}",
        f"**Anotações do entrevistador**:\n{_or_default(context.notes)}",
    ]
    if mode is EvaluationMode.WITH_COMPETENCY_SCHEMA:
        sections.append(
            "**Competências avaliadas nesta etapa**:\n"
            + _format_rubrics(_active_competencies(context))
        )
    else:
        sections.append(f"**Valores organizacionais**:\n{_or_default(context.company_values)}")
    return "\n\n".join(sections)


def _analysis_section(
    mode: EvaluationMode,
    *,
    max_strengths: int,
    max_concerns: int,
    max_development: int,
) -> str:
    steps = [
        f"Destaque no máximo {max_strengths} pontos fortes do candidato.",
        (
            f"Destaque no máximo {max_development} pontos em que o candidato ainda não "
            "é forte mas demonstra potencial de desenvolvimento."
        ),
        (
            f"Destaque no máximo {max_concerns} pontos de atenção: pontos desalinhados "
            "com a descrição e o escopo da vaga, incluindo expectativas salariais, "
            "benefícios, modelo ou ambiente de trabalho."
        ),
    ]
    if mode is EvaluationMode.WITH_COMPETENCY_SCHEMA:
        levels = ", ".join(f'"{label}"' for label in COMPETENCY_LEVELS)
        steps.append(
            "Avalie TODAS as competências listadas, sem omitir nenhuma e sem criar novas. "
            f"Classifique cada uma em exatamente uma destas categorias: {levels}. "
            "Justifique cada classificação citando trechos ou fatos da transcrição. "
            f'Quando não houver evidência na entrevista, use exatamente "{INSUFFICIENT_EVIDENCE}" '
            "no lugar da categoria. Nenhuma outra categoria é permitida."
        )
        steps.append("Identifique a motivação do candidato para assumir a vaga.")
    else:
        steps.append(
            "Identifique a motivação do candidato para assumir a vaga e os pontos de maior "
            "e menor aderência aos valores organizacionais informados."
        )
    steps.append(
        "Identifique gaps da entrevista: algo que faltou ser consultado, avaliado ou "
        "aprofundado pelo entrevistador de acordo com o roteiro, para ser explorado em "
        "outras entrevistas."
    )

    numbered = "\n".join(f"{index}. {step}" for index, step in enumerate(steps, start=1))
    final_step = len(steps) + 1
    return (
        "#INSTRUÇÕES DO PARECER:\n"
        "- Entenda \"ponto\" como competências, comportamentos, habilidades, experiências, "
        "comunicação, postura, requisitos e expectativas.\n"
        "- Cite termos técnicos e trechos da entrevista para dar credibilidade ao parecer.\n\n"
        f"ANÁLISE:\n{numbered}\n\n"
        "REFINAMENTO:\n"
        f"{final_step}. Depois dos passos anteriores, revise todo o parecer para garantir "
        "coerência entre os passos e remova informações irrelevantes para o recrutador. "
        "Esta revisão é um passo interno: não a inclua como seção nem a mencione no resultado."
    )


def _output_template(
    context: ReviewContext,
    mode: EvaluationMode,
    *,
    max_strengths: int,
    max_concerns: int,
    max_development: int,
) -> str:
    parts = [
        TEMPLATE_HEADER,
        "**Parecer:**\n[Resumo breve do perfil do candidato com base na entrevista]",
        f"**Pontos Fortes:**\n{_bullet_slots(max_strengths)}",
        f"**Potenciais de desenvolvimento:**\n{_bullet_slots(max_development)}",
        f"**Pontos de Atenção:**\n{_bullet_slots(max_concerns)}",
    ]
    if mode is EvaluationMode.WITH_COMPETENCY_SCHEMA:
        choices = " | ".join((*COMPETENCY_LEVELS, INSUFFICIENT_EVIDENCE))
        lines = "\n".join(
            f"- {rubric.name.strip()}: [{choices}] - [evidência]"
            for rubric in _active_competencies(context)
        )
        parts.append(f"**Avaliação por Competência:**\n{lines}")
        parts.append("**Motivação:**\n[Resumo das motivações do candidato]")
    else:
        parts.append(
            "**Motivação:**\n[Resumo das motivações e do alinhamento com os valores do candidato]"
        )
    parts.append("**Insights para outras entrevistas:**\n- [item 1]\n- [item 2]")
    return "\n\n".join(parts)


def build_review_prompt(
    context: ReviewContext,
    *,
    max_strengths: int = 5,
    max_concerns: int = 5,
    max_development: int = 3,
) -> PromptBundle:
    """Compose system/user prompts for one interview review."""

    mode = context.mode
    user_prompt = "\n\n---\n\n".join(
        (
            "Com base nos dados abaixo, produza um parecer estruturado, objetivo e "
            "imparcial sobre o candidato seguindo o template de output especificado.",
            _input_section(context, mode),
            _analysis_section(
                mode,
                max_strengths=max_strengths,
                max_concerns=max_concerns,
                max_development=max_development,
            ),
            _output_template(
                context,
                mode,
                max_strengths=max_strengths,
                max_concerns=max_concerns,
                max_development=max_development,
            ),
        )
    )
    return PromptBundle(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt, mode=mode)


__all__ = [
    "COMPETENCY_LEVELS",
    "INSUFFICIENT_EVIDENCE",
    "NOT_INFORMED",
    "TEMPLATE_HEADER",
    "CompetencyRubric",
    "EvaluationMode",
    "PromptBundle",
    "ReviewContext",
    "build_review_prompt",
]
