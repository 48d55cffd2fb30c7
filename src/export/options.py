"""Export options and the request-boundary checkbox normalizer.

Checkbox forms submit both the checked value ("1") and a hidden fallback
("0"), so a single option can arrive as a scalar or as a short list.
Normalization happens here, once; everything past this module only sees
the two booleans of ExportOptions.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Values that cast to False, mirroring common form/boolean parsing
FALSE_VALUES = frozenset({"0", "f", "F", "false", "FALSE", "off", "OFF"})

# (dialog form field name, plain query parameter name) per option
OPTION_PARAMS = {
    "participants": ("md_include_participants", "participants"),
    "outcomes": ("md_include_outcomes", "outcomes"),
}


def normalize_checkbox_option(value: Any) -> Any:
    """Collapse a raw checkbox value to a single value.

    Args:
        value: None, a scalar, or a list/tuple of submitted values

    Returns:
        "1" if a list contains "1", else the last list element; scalars
        pass through unchanged and None stays None
    """
    if value is None:
        return None

    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        if "1" in value:
            return "1"
        return value[-1] if value else None

    return value


def cast_boolean(value: Any) -> bool:
    """Parse a truthy string ("1", "true") or boolean into a bool.

    None and blank strings are False.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip()
    if not text:
        return False
    return text not in FALSE_VALUES


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def markdown_export_options(params: Mapping[str, Any]) -> dict[str, Any]:
    """Extract normalized option values from request parameters.

    The dialog field name wins over the plain parameter name. Options
    that are absent or blank are omitted so the exporter default applies.

    Args:
        params: Query/form parameters, values as scalars or lists

    Returns:
        Dict with at most the keys "participants" and "outcomes"
    """
    options: dict[str, Any] = {}
    for option, names in OPTION_PARAMS.items():
        raw = None
        for name in names:
            candidate = params.get(name)
            if candidate is not None and candidate != []:
                raw = candidate
                break
        value = normalize_checkbox_option(raw)
        if not _is_blank(value):
            options[option] = value
    return options


class ExportOptions(BaseModel):
    """What to include in a Markdown export. Both default to True."""

    model_config = ConfigDict(frozen=True)

    include_participants: bool = Field(
        default=True, description="Emit the Participants section"
    )
    include_outcomes: bool = Field(
        default=True, description="Emit outcomes under agenda items"
    )

    @classmethod
    def from_raw(
        cls,
        participants: Any = None,
        outcomes: Any = None,
    ) -> "ExportOptions":
        """Build options from normalized raw values.

        Absent values keep the default (True); present values are cast
        with cast_boolean.
        """
        return cls(
            include_participants=(
                True if participants is None else cast_boolean(participants)
            ),
            include_outcomes=True if outcomes is None else cast_boolean(outcomes),
        )

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ExportOptions":
        """Build options straight from request parameters."""
        return cls.from_raw(**markdown_export_options(params))
