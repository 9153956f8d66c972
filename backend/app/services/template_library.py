"""
Back Office API - Questionnaire Template Library
=================================================

What:  Built-in questionnaire templates shown in the settings template
       library preview dialog.
How:   Static content keyed by template title. Unknown titles get a
       placeholder preview so the dialog always has something to render.
"""

from typing import Dict, List, NamedTuple, Tuple

from app.schemas.template import (
    TemplatePreview,
    TemplateQuestion,
    TemplateSection,
)

REQUIRED_MARKER_NOTE = "* Indicates a required field"


class SectionContent(NamedTuple):
    heading: str
    questions: Tuple[str, ...]


class TemplateContent(NamedTuple):
    sections: Tuple[SectionContent, ...]
    # Shared answer scale; empty when the template has none
    options: Tuple[str, ...] = ()


_TEMPLATES: Dict[str, TemplateContent] = {
    "GAD-7 (Generalized Anxiety Disorder)": TemplateContent(
        sections=(
            SectionContent(
                heading="Over the last 2 weeks, how often have you been bothered by the following problems?",
                questions=(
                    "Feeling nervous, anxious, or on edge.",
                    "Not being able to stop or control worrying.",
                    "Worrying too much about different things.",
                    "Trouble relaxing.",
                ),
            ),
        ),
        options=(
            "Not at all",
            "Several days",
            "Over half the days",
            "Nearly every day",
        ),
    ),
}

_PLACEHOLDER = TemplateContent(
    sections=(
        SectionContent(
            heading="Template Preview",
            questions=("This is a placeholder preview for the template content.",),
        ),
    ),
)


def display_title(title: str) -> str:
    """'GAD-7 (Generalized Anxiety Disorder)' → 'GAD-7'"""
    return title.split(" (")[0]


def list_template_titles() -> List[str]:
    return sorted(_TEMPLATES)


def get_template_preview(title: str) -> TemplatePreview:
    content = _TEMPLATES.get(title, _PLACEHOLDER)

    sections = [
        TemplateSection(
            title=section.heading,
            questions=[
                TemplateQuestion(number=i, text=text, required=True)
                for i, text in enumerate(section.questions, start=1)
            ],
        )
        for section in content.sections
    ]

    return TemplatePreview(
        title=title,
        display_title=display_title(title),
        sections=sections,
        options=list(content.options),
        required_marker_note=REQUIRED_MARKER_NOTE,
    )
