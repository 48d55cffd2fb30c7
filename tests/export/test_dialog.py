"""Tests for the export options dialog."""

from datetime import UTC, datetime

from src.export.dialog import ExportDialogRenderer, export_markdown_path
from src.export.i18n import CatalogTranslator
from src.models.meeting import Meeting, Project


def make_meeting(title: str = "Weekly Sync") -> Meeting:
    return Meeting(
        id=42,
        title=title,
        start_time=datetime(2024, 12, 31, 13, 30, tzinfo=UTC),
        project=Project(id=1, identifier="demo-project", name="Demo Project"),
    )


def test_export_markdown_path():
    assert (
        export_markdown_path("demo-project", 42)
        == "/projects/demo-project/meetings/42/export_markdown"
    )


def test_dialog_posts_to_export_endpoint():
    html = ExportDialogRenderer().render(make_meeting(), CatalogTranslator())

    assert 'action="/projects/demo-project/meetings/42/export_markdown"' in html
    assert html.count('value="0"') == 2
    assert "Weekly Sync" in html
    assert "Demo Project" in html


def test_checkbox_states_follow_arguments():
    html = ExportDialogRenderer().render(
        make_meeting(),
        CatalogTranslator(),
        include_participants=False,
        include_outcomes=True,
    )

    assert 'name="md_include_participants" value="1">' in html
    assert 'name="md_include_outcomes" value="1" checked>' in html


def test_title_is_escaped():
    html = ExportDialogRenderer().render(
        make_meeting("<script>alert(1)</script>"), CatalogTranslator()
    )

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_localized_labels():
    html = ExportDialogRenderer().render(make_meeting(), CatalogTranslator(locale="de"))

    assert "Markdown exportieren" in html
    assert "Teilnehmende einbeziehen" in html
