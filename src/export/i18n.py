"""Message catalog for export labels and status messages.

Labels are looked up by key so the host can plug in its own translation
backend; CatalogTranslator is the built-in dictionary implementation.
"""

from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "label_project": "Project",
        "label_date": "Date",
        "label_time": "Time",
        "label_location": "Location",
        "label_participants": "Participants",
        "label_agenda": "Agenda",
        "label_notes": "Notes",
        "label_outcomes": "Outcomes",
        "label_task": "Task",
        "label_agenda_item_undisclosed_wp": "Work package #{id} not visible",
        "label_agenda_item_deleted_wp": "Deleted work package reference",
        "label_export_markdown": "Export Markdown",
        "export_dialog_description": "Export meeting as Markdown",
        "export_dialog_include_participants": "Include participants",
        "export_dialog_include_participants_caption": (
            "Add a list of meeting participants"
        ),
        "export_dialog_include_outcomes": "Include outcomes",
        "export_dialog_include_outcomes_caption": "Add meeting outcomes/decisions",
        "export_dialog_submit": "Download",
        "export_title": "Meeting Markdown export",
        "export_succeeded": "The export has completed successfully.",
        "export_failed": "The export has failed: {message}",
        "export_meeting_not_found": "The meeting could not be found.",
    },
    "de": {
        "label_project": "Projekt",
        "label_date": "Datum",
        "label_time": "Uhrzeit",
        "label_location": "Ort",
        "label_participants": "Teilnehmende",
        "label_agenda": "Agenda",
        "label_notes": "Notizen",
        "label_outcomes": "Ergebnisse",
        "label_task": "Aufgabe",
        "label_agenda_item_undisclosed_wp": "Arbeitspaket #{id} nicht sichtbar",
        "label_agenda_item_deleted_wp": "Gelöschte Arbeitspaket-Referenz",
        "label_export_markdown": "Markdown exportieren",
        "export_dialog_description": "Besprechung als Markdown exportieren",
        "export_dialog_include_participants": "Teilnehmende einbeziehen",
        "export_dialog_include_participants_caption": (
            "Liste der Teilnehmenden hinzufügen"
        ),
        "export_dialog_include_outcomes": "Ergebnisse einbeziehen",
        "export_dialog_include_outcomes_caption": (
            "Ergebnisse und Entscheidungen hinzufügen"
        ),
        "export_dialog_submit": "Herunterladen",
        "export_title": "Markdown-Export der Besprechung",
        "export_succeeded": "Der Export wurde erfolgreich abgeschlossen.",
        "export_failed": "Der Export ist fehlgeschlagen: {message}",
        "export_meeting_not_found": "Die Besprechung wurde nicht gefunden.",
    },
}


@runtime_checkable
class Translator(Protocol):
    """Anything that can turn a message key into display text."""

    def t(self, key: str, **kwargs: object) -> str:
        """Translate a key, interpolating keyword arguments."""
        ...


class CatalogTranslator:
    """Dictionary-backed translator with English fallback.

    Lookup order is the requested locale, then English, then the key
    itself so a missing message never breaks an export.
    """

    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        messages: dict[str, dict[str, str]] | None = None,
    ):
        self.messages = messages if messages is not None else MESSAGES
        if locale not in self.messages:
            logger.warning("unknown locale, falling back", locale=locale)
            locale = DEFAULT_LOCALE
        self.locale = locale

    def t(self, key: str, **kwargs: object) -> str:
        template = self.messages.get(self.locale, {}).get(key)
        if template is None:
            template = self.messages.get(DEFAULT_LOCALE, {}).get(key)
        if template is None:
            logger.warning("missing translation", key=key, locale=self.locale)
            return key
        return template.format(**kwargs) if kwargs else template
