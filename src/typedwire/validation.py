"""Validation pipeline shared by every dispatch path.

``validate(validator, raw)`` never raises for malformed input. It returns
``Accepted(value)`` or ``Rejected(issues)`` where the issues are ordered the way
pydantic walks the schema: object fields in declaration order, sequence items by
index.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import from_json, to_json

from typedwire.config import get_settings
from typedwire.errors import SchemaValidationError
from typedwire.utils.logger_util import get_logger

logger = get_logger(__name__)

# pydantic error types that name a JSON type the input should have had
_EXPECTED_BY_ERROR_TYPE: Dict[str, str] = {
    "float_type": "number",
    "float_parsing": "number",
    "finite_number": "number",
    "int_type": "integer",
    "int_parsing": "integer",
    "int_from_float": "integer",
    "string_type": "string",
    "bool_type": "boolean",
    "bool_parsing": "boolean",
    "list_type": "array",
    "tuple_type": "array",
    "set_type": "array",
    "dict_type": "object",
    "model_type": "object",
    "model_attributes_type": "object",
    "dataclass_type": "object",
    "none_required": "null",
}


class Issue(BaseModel):
    code: str
    path: List[Union[str, int]]
    message: str
    expected: Optional[str] = None
    received: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def json_type_name(value: Any) -> str:
    """Name of the JSON type of ``value`` as used in issue ``received`` fields."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def issue_from_pydantic(error: Dict[str, Any]) -> Issue:
    code = error["type"]
    ctx = error.get("ctx") or {}
    expected = _EXPECTED_BY_ERROR_TYPE.get(code)
    if expected is None and "expected" in ctx:
        expected = str(ctx["expected"])
    if code == "missing":
        # pydantic reports the parent object as the input of a missing field
        received = "undefined"
    else:
        received = json_type_name(error.get("input"))
    return Issue(
        code=code,
        path=list(error.get("loc", ())),
        message=error.get("msg", ""),
        expected=expected,
        received=received,
    )


def decode_json(raw: Union[bytes, bytearray, str]) -> Any:
    """Decode wire text as strict JSON.

    Raises ``ValueError`` for malformed input, for the non-JSON literals
    ``NaN``/``Infinity`` and for nesting beyond the parser's depth limit.
    """
    return from_json(raw, allow_inf_nan=False)


def serialize_issues(issues: List[Issue]) -> str:
    return json.dumps([issue.to_wire() for issue in issues], separators=(",", ":"))


@dataclass(frozen=True)
class Accepted:
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    issues: List[Issue]

    @property
    def ok(self) -> bool:
        return False

    def error(self) -> SchemaValidationError:
        return SchemaValidationError(self.issues)

    def to_json(self) -> str:
        return serialize_issues(self.issues)


ValidationResult = Union[Accepted, Rejected]


class Validator:
    """Checks raw (JSON-decoded) values against a pydantic-supported type.

    ``shape`` may be a ``BaseModel`` subclass, a builtin such as ``float`` or
    ``str``, or any typing construct pydantic understands. Validation is strict
    unless configured otherwise, so ``"5"`` is not accepted for a number.

    Values are validated in pydantic's JSON mode: enums, datetimes, UUIDs and
    tuples are accepted in the string/array form they take on the wire.
    """

    def __init__(self, shape: Any, strict: Optional[bool] = None):
        self.shape = shape
        self.strict = get_settings().strict_validation if strict is None else bool(strict)
        self._adapter = TypeAdapter(shape)

    def validate(self, raw: Any) -> ValidationResult:
        # unknown objects become strings and are rejected by the schema
        text = to_json(raw, serialize_unknown=True)
        try:
            value = self._adapter.validate_json(text, strict=self.strict)
        except ValidationError as exc:
            issues = [issue_from_pydantic(e) for e in exc.errors(include_url=False)]
            logger.debug("validation against %r rejected with %d issue(s)", self.shape, len(issues))
            return Rejected(issues)
        return Accepted(value)

    def __repr__(self) -> str:
        return f"Validator({getattr(self.shape, '__name__', self.shape)!r}, strict={self.strict})"


def as_validator(shape: Any) -> Validator:
    if isinstance(shape, Validator):
        return shape
    return Validator(shape)


def validate(validator: Any, raw: Any) -> ValidationResult:
    return as_validator(validator).validate(raw)
