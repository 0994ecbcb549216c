"""Typed reads from the untyped parameter bag an agent sends.

Every reader is a pure projection over the mapping: it never mutates it
and raises MissingRequiredParameter or InvalidParameterType on bad input.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from actiongate.exceptions import InvalidParameterType, MissingRequiredParameter
from actiongate.platforms.models import PlatformType

ParamKind = Literal["string", "number", "integer", "string_array", "boolean", "buttons"]


class InlineButton(BaseModel):
    """One Telegram inline keyboard button."""

    text: str
    callback_data: str


_BUTTON_ROWS = TypeAdapter(list[list[InlineButton]])


def read_string_param(
    params: Mapping[str, Any],
    key: str,
    *,
    required: bool = False,
    allow_empty: bool = False,
    trim: bool = True,
    label: Optional[str] = None,
) -> Optional[str]:
    """Read a string parameter.

    Args:
        params: Parameter bag
        key: Key to read
        required: Raise if the value is missing (or empty, see allow_empty)
        allow_empty: Let a present but empty string satisfy ``required``
        trim: Strip surrounding whitespace; pass False for opaque values
            such as URLs and tokens
        label: Name reported in errors instead of ``key``

    Returns:
        The string, or None when absent and not required

    Raises:
        MissingRequiredParameter: If required and missing
        InvalidParameterType: If the value is not a string
    """
    label = label or key
    raw = params.get(key)
    if raw is None:
        if required:
            raise MissingRequiredParameter(label)
        return None
    if not isinstance(raw, str):
        raise InvalidParameterType(label, "a string")

    value = raw.strip() if trim else raw
    if not value:
        if allow_empty:
            return value
        if required:
            raise MissingRequiredParameter(label)
        return None
    return value


def read_number_param(
    params: Mapping[str, Any],
    key: str,
    *,
    required: bool = False,
    integer: bool = False,
    label: Optional[str] = None,
) -> Optional[float | int]:
    """Read a numeric parameter.

    Numeric strings ("15", " 2.5 ") are accepted. With ``integer=True`` the
    value is truncated toward zero.

    Raises:
        MissingRequiredParameter: If required and missing
        InvalidParameterType: If the value is not a finite number
    """
    label = label or key
    raw = params.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        if required:
            raise MissingRequiredParameter(label)
        return None

    if isinstance(raw, bool):
        raise InvalidParameterType(label, "a number")
    if not isinstance(raw, (int, float, str)):
        raise InvalidParameterType(label, "a number")
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (ValueError, OverflowError):
        raise InvalidParameterType(label, "a number") from None

    if not math.isfinite(value):
        raise InvalidParameterType(label, "a finite number")
    if integer:
        return math.trunc(value)
    if isinstance(raw, int):
        return raw
    return value


def read_string_array_param(
    params: Mapping[str, Any],
    key: str,
    *,
    required: bool = False,
    label: Optional[str] = None,
) -> Optional[list[str]]:
    """Read a list of strings.

    A single string is treated as a one-element list. Entries are trimmed
    and blank entries dropped.

    Raises:
        MissingRequiredParameter: If required and nothing usable is present
        InvalidParameterType: If the value is neither a string nor a list of strings
    """
    label = label or key
    raw = params.get(key)
    if raw is None:
        values: list[str] = []
    elif isinstance(raw, str):
        values = [raw.strip()] if raw.strip() else []
    elif isinstance(raw, (list, tuple)):
        if not all(isinstance(entry, str) for entry in raw):
            raise InvalidParameterType(label, "a list of strings")
        values = [entry.strip() for entry in raw if entry.strip()]
    else:
        raise InvalidParameterType(label, "a list of strings")

    if not values:
        if required:
            raise MissingRequiredParameter(label)
        return None
    return values


def read_bool_param(params: Mapping[str, Any], key: str) -> Optional[bool]:
    """Read a boolean flag; anything that is not a bool reads as unset."""
    raw = params.get(key)
    return raw if isinstance(raw, bool) else None


def read_buttons_param(
    params: Mapping[str, Any], key: str, *, label: Optional[str] = None
) -> Optional[list[list[dict[str, str]]]]:
    """Read Telegram inline keyboard rows (lists of {text, callback_data})."""
    label = label or key
    raw = params.get(key)
    if raw is None:
        return None
    try:
        rows = _BUTTON_ROWS.validate_python(raw)
    except ValidationError:
        raise InvalidParameterType(label, "rows of {text, callback_data} buttons") from None
    return [[button.model_dump() for button in row] for row in rows]


@dataclass(frozen=True)
class ParamSpec:
    """How to read one parameter for an action.

    ``fallback`` names a second key read (as a string) when this one is
    absent, e.g. ``channelId`` falling back to ``to``. ``providers``
    restricts the spec to some providers.
    """

    name: str
    kind: ParamKind = "string"
    required: bool = False
    allow_empty: bool = False
    trim: bool = True
    fallback: Optional[str] = None
    providers: Optional[frozenset[PlatformType]] = None
    label: Optional[str] = None

    def applies_to(self, provider: PlatformType) -> bool:
        """Whether this spec is read for the given provider."""
        return self.providers is None or provider in self.providers


class ParameterExtractor:
    """Applies a sequence of ParamSpecs to a parameter bag."""

    def extract(self, specs: Iterable[ParamSpec], params: Mapping[str, Any]) -> dict[str, Any]:
        """Read every spec in order.

        The first failing spec aborts extraction.

        Returns:
            Values keyed by spec name (None for absent optional values)
        """
        return {spec.name: self.read(spec, params) for spec in specs}

    def read(self, spec: ParamSpec, params: Mapping[str, Any]) -> Any:
        """Read a single spec, applying its fallback key."""
        if spec.fallback is None:
            return self._read(spec, params, spec.required)

        value = self._read(spec, params, required=False)
        if value is None:
            value = read_string_param(params, spec.fallback, required=spec.required)
        return value

    def _read(self, spec: ParamSpec, params: Mapping[str, Any], required: bool) -> Any:
        if spec.kind == "string":
            return read_string_param(
                params,
                spec.name,
                required=required,
                allow_empty=spec.allow_empty,
                trim=spec.trim,
                label=spec.label,
            )
        if spec.kind in ("number", "integer"):
            return read_number_param(
                params,
                spec.name,
                required=required,
                integer=spec.kind == "integer",
                label=spec.label,
            )
        if spec.kind == "string_array":
            return read_string_array_param(params, spec.name, required=required, label=spec.label)
        if spec.kind == "boolean":
            return read_bool_param(params, spec.name)
        if spec.kind == "buttons":
            return read_buttons_param(params, spec.name, label=spec.label)
        raise ValueError(f"Unknown parameter kind: {spec.kind}")
