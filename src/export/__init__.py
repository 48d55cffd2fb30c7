"""Meeting Markdown export: options, rendering and the export job."""

from src.export.i18n import CatalogTranslator, Translator
from src.export.markdown import MeetingMarkdownExporter, render_markdown
from src.export.options import (
    ExportOptions,
    cast_boolean,
    markdown_export_options,
    normalize_checkbox_option,
)
from src.export.registry import ExporterRegistry, default_registry

__all__ = [
    "CatalogTranslator",
    "ExportOptions",
    "ExporterRegistry",
    "MeetingMarkdownExporter",
    "Translator",
    "cast_boolean",
    "default_registry",
    "markdown_export_options",
    "normalize_checkbox_option",
    "render_markdown",
]
