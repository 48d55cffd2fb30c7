"""Registry of single-record exporters per model and format."""

from typing import Any

import structlog

logger = structlog.get_logger()


class ExporterNotFoundError(LookupError):
    """Raised when no exporter is registered for a model/format pair."""


class ExporterRegistry:
    """Maps (model, format key) to an exporter class.

    Exporter classes expose a ``key`` class attribute naming their format.
    """

    def __init__(self):
        self._single: dict[type, dict[str, type]] = {}

    def register_single(self, model: type, exporter: type) -> None:
        """Register an exporter for single records of a model.

        Registering the same exporter again is a no-op.
        """
        formats = self._single.setdefault(model, {})
        key = exporter.key
        if formats.get(key) is not exporter:
            formats[key] = exporter
            logger.info(
                "registered exporter",
                model=model.__name__,
                format=key,
                exporter=exporter.__name__,
            )

    def single_exporter(self, model: type, format_key: str) -> Any:
        """Look up the exporter class for a model and format.

        Raises:
            ExporterNotFoundError: If nothing is registered
        """
        try:
            return self._single[model][format_key]
        except KeyError:
            msg = f"No {format_key} exporter registered for {model.__name__}"
            raise ExporterNotFoundError(msg) from None


def default_registry() -> ExporterRegistry:
    """Registry with the meeting Markdown exporter registered."""
    from src.export.markdown import MeetingMarkdownExporter
    from src.models.meeting import Meeting

    registry = ExporterRegistry()
    registry.register_single(Meeting, MeetingMarkdownExporter)
    return registry
