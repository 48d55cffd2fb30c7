"""Jinja2 renderer for the Markdown export options dialog."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.export.i18n import Translator
from src.models.meeting import Meeting

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
DIALOG_TEMPLATE = "markdown_export_dialog.html.j2"


def export_markdown_path(project_identifier: str, meeting_id: int) -> str:
    """Path of the start-export endpoint for a meeting."""
    return f"/projects/{project_identifier}/meetings/{meeting_id}/export_markdown"


class ExportDialogRenderer:
    """Render the options dialog shown before starting an export.

    Participants are checked by default, outcomes are not.
    """

    def __init__(self, template_dir: str | Path = TEMPLATE_DIR):
        """Initialize renderer with template directory.

        Args:
            template_dir: Path to directory containing .j2 templates
        """
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "htm", "html.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(
        self,
        meeting: Meeting,
        translator: Translator,
        *,
        include_participants: bool = True,
        include_outcomes: bool = False,
    ) -> str:
        """Render the dialog HTML for a meeting.

        Args:
            meeting: Meeting being exported
            translator: Label lookup
            include_participants: Initial state of the participants checkbox
            include_outcomes: Initial state of the outcomes checkbox

        Returns:
            HTML fragment
        """
        template = self.env.get_template(DIALOG_TEMPLATE)
        return template.render(
            meeting=meeting,
            project_name=meeting.project.name,
            action=export_markdown_path(meeting.project.identifier, meeting.id),
            include_participants=include_participants,
            include_outcomes=include_outcomes,
            t=translator.t,
        )
