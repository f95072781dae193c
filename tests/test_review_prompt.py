"""Tests for review prompt assembly."""

from __future__ import annotations

import re

from app.services.review_prompt import (
    COMPETENCY_LEVELS,
    INSUFFICIENT_EVIDENCE,
    NOT_INFORMED,
    TEMPLATE_HEADER,
    CompetencyRubric,
    EvaluationMode,
    ReviewContext,
    build_review_prompt,
)

COMPETENCIES = (
    CompetencyRubric(
        name="Comunicação",
        description="Clareza ao se expressar",
        below_expected="Respostas confusas",
        partially_meets="Às vezes claro",
        meets="Claro e objetivo",
        exceeds="Didático e envolvente",
    ),
    CompetencyRubric(name="Negociação"),
    CompetencyRubric(name="Prospecção", meets="Gera pipeline próprio"),
)


def _template(prompt: str) -> str:
    return prompt.split(TEMPLATE_HEADER, 1)[1]


def test_schema_mode_has_one_template_line_per_competency():
    context = ReviewContext(transcript="Olá, sou a Ana.", competencies=COMPETENCIES)

    bundle = build_review_prompt(context)

    assert bundle.mode is EvaluationMode.WITH_COMPETENCY_SCHEMA
    template = _template(bundle.user_prompt)
    for rubric in COMPETENCIES:
        lines = [line for line in template.splitlines() if line.startswith(f"- {rubric.name}:")]
        assert len(lines) == 1


def test_schema_mode_only_offers_fixed_labels_or_sentinel():
    bundle = build_review_prompt(ReviewContext(transcript="t", competencies=COMPETENCIES))

    template = _template(bundle.user_prompt)
    for rubric in COMPETENCIES:
        line = next(line for line in template.splitlines() if line.startswith(f"- {rubric.name}:"))
        options = re.search(r"\[([^\]]+)\]", line).group(1).split(" | ")
        assert options == [*COMPETENCY_LEVELS, INSUFFICIENT_EVIDENCE]
    assert INSUFFICIENT_EVIDENCE in bundle.user_prompt
    assert "Nenhuma outra categoria" in bundle.user_prompt


def test_schema_mode_lists_rubric_texts_with_defaults():
    bundle = build_review_prompt(ReviewContext(transcript="t", competencies=COMPETENCIES))

    assert "- Supera: Didático e envolvente" in bundle.user_prompt
    assert f"- Abaixo do esperado: {NOT_INFORMED}" in bundle.user_prompt
    assert "Valores organizacionais" not in bundle.user_prompt


def test_values_only_mode_without_competencies():
    context = ReviewContext(
        transcript="t",
        company_values="Dono do resultado",
        competencies=(CompetencyRubric(name="  "),),
    )

    bundle = build_review_prompt(context)

    assert bundle.mode is EvaluationMode.VALUES_ONLY
    assert "Dono do resultado" in bundle.user_prompt
    assert "Avaliação por Competência" not in bundle.user_prompt
    assert "valores organizacionais" in bundle.user_prompt


def test_caps_and_common_sections_in_both_modes():
    for competencies in ((), COMPETENCIES):
        bundle = build_review_prompt(
            ReviewContext(transcript="t", competencies=competencies),
            max_strengths=3,
            max_concerns=2,
        )
        template = _template(bundle.user_prompt)
        strengths = template.split("**Pontos Fortes:**", 1)[1].split("**", 1)[0]
        concerns = template.split("**Pontos de Atenção:**", 1)[1].split("**", 1)[0]

        assert "no máximo 3 pontos fortes" in bundle.user_prompt
        assert "no máximo 2 pontos de atenção" in bundle.user_prompt
        assert strengths.count("- [item") == 3
        assert concerns.count("- [item") == 2
        assert "**Motivação:**" in template
        assert "**Insights para outras entrevistas:**" in template


def test_self_review_is_instruction_not_output_section():
    for competencies in ((), COMPETENCIES):
        bundle = build_review_prompt(ReviewContext(transcript="t", competencies=competencies))

        before, template = bundle.user_prompt.split(TEMPLATE_HEADER, 1)
        assert "REFINAMENTO" in before
        assert "não a inclua como seção" in before
        assert "revisão" not in template.lower()
        assert "revise" not in template.lower()
        assert "refinamento" not in template.lower()


def test_blank_inputs_are_marked_not_informed():
    bundle = build_review_prompt(ReviewContext(transcript="t", job_description="  "))

    assert f"**Descrição da vaga**:\n{NOT_INFORMED}" in bundle.user_prompt
    assert f"**Nome da vaga**:\n{NOT_INFORMED}" in bundle.user_prompt


def test_development_potential_section_is_capped_in_both_modes():
    for competencies in ((), COMPETENCIES):
        bundle = build_review_prompt(
            ReviewContext(transcript="t", competencies=competencies),
            max_development=2,
        )
        template = _template(bundle.user_prompt)
        development = template.split("**Potenciais de desenvolvimento:**", 1)[1].split("**", 1)[0]

        assert "no máximo 2 pontos em que o candidato ainda não é forte" in bundle.user_prompt
        assert development.count("- [item") == 2
        assert template.index("**Pontos Fortes:**") < template.index(
            "**Potenciais de desenvolvimento:**"
        ) < template.index("**Pontos de Atenção:**")
