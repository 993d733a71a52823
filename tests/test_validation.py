import json
from datetime import datetime
from enum import Enum
from typing import List, Tuple

import pytest
from pydantic import BaseModel, field_validator

from typedwire.demo import DivideParams
from typedwire.errors import SchemaValidationError
from typedwire.validation import Accepted, Rejected, Validator, as_validator, decode_json, serialize_issues, validate


class Basket(BaseModel):
    owner: str
    items: List[int]


class Positive(BaseModel):
    amount: float

    @field_validator("amount")
    def _positive(cls, v: float):
        if v <= 0:
            raise ValueError("amount must be positive")
        return v


def test_accepts_valid_model():
    res = validate(DivideParams, {"num1": 10, "num2": 5})
    assert isinstance(res, Accepted)
    assert res.ok
    assert res.value == DivideParams(num1=10, num2=5)


def test_accepts_plain_types():
    assert validate(float, 2).value == 2
    assert validate(str, "Hi").value == "Hi"
    assert isinstance(validate(str, 3), Rejected)


def test_missing_fields_in_declaration_order():
    res = validate(DivideParams, {})
    assert isinstance(res, Rejected)
    assert [i.path for i in res.issues] == [["num1"], ["num2"]]
    for issue in res.issues:
        assert issue.code == "missing"
        assert issue.received == "undefined"
        assert issue.message == "Field required"


def test_wrong_type_reports_expected_and_received():
    res = validate(DivideParams, {"num1": "ten", "num2": 5})
    assert isinstance(res, Rejected)
    assert len(res.issues) == 1
    issue = res.issues[0]
    assert issue.path == ["num1"]
    assert issue.code in ("float_type", "float_parsing")
    assert issue.expected == "number"
    assert issue.received == "string"


def test_strict_by_default_and_lax_on_request():
    assert isinstance(validate(DivideParams, {"num1": "10", "num2": 5}), Rejected)
    lax = Validator(DivideParams, strict=False).validate({"num1": "10", "num2": 5})
    assert isinstance(lax, Accepted)
    assert lax.value.num1 == 10.0


def test_nested_path_contains_index():
    res = validate(Basket, {"owner": "eve", "items": [1, "x", 3]})
    assert isinstance(res, Rejected)
    assert [i.path for i in res.issues] == [["items", 1]]


def test_custom_refinement_message():
    res = validate(Positive, {"amount": -1})
    assert isinstance(res, Rejected)
    assert res.issues[0].code == "value_error"
    assert "amount must be positive" in res.issues[0].message


def test_never_raises_on_garbage():
    for raw in (None, object(), [1, 2], "text", {"num1": None}):
        assert isinstance(validate(DivideParams, raw), Rejected)


def test_serialized_issues_omit_absent_fields():
    res = validate(DivideParams, {})
    assert json.loads(serialize_issues(res.issues)) == [
        {"code": "missing", "path": ["num1"], "message": "Field required", "received": "undefined"},
        {"code": "missing", "path": ["num2"], "message": "Field required", "received": "undefined"},
    ]
    assert res.to_json() == serialize_issues(res.issues)


def test_rejected_error_message():
    err = validate(DivideParams, {}).error()
    assert isinstance(err, SchemaValidationError)
    assert str(err).startswith("2 validation issue(s)")
    assert len(err.issues) == 2


def test_as_validator_reuses_instances():
    v = Validator(float)
    assert as_validator(v) is v
    assert isinstance(as_validator(float), Validator)


@pytest.mark.parametrize("bad", [[], {"owner": "x"}, {"owner": 1, "items": []}])
def test_basket_rejections_are_results(bad):
    assert not validate(Basket, bad).ok


class Color(str, Enum):
    RED = "red"
    GREEN = "green"


class Reading(BaseModel):
    color: Color
    at: datetime
    point: Tuple[int, int]


def test_wire_forms_of_rich_types_are_accepted():
    res = validate(Reading, json.loads('{"color":"red","at":"2024-01-01T00:00:00Z","point":[1,2]}'))
    assert isinstance(res, Accepted)
    assert res.value.color is Color.RED
    assert res.value.at.year == 2024
    assert res.value.point == (1, 2)


def test_rich_type_issues_name_the_wire_types():
    res = validate(Reading, {"color": "blue", "at": "2024-01-01T00:00:00Z", "point": "1,2"})
    assert isinstance(res, Rejected)
    assert [i.path for i in res.issues] == [["color"], ["point"]]
    assert res.issues[1].expected == "array"
    assert res.issues[1].received == "string"


def test_decode_json_rejects_non_json_literals():
    for text in ('{"x": NaN}', '[Infinity]', "-Infinity"):
        with pytest.raises(ValueError):
            decode_json(text)


def test_decode_json_reports_deep_nesting_as_value_error():
    with pytest.raises(ValueError):
        decode_json("[" * 100000)
    with pytest.raises(ValueError):
        decode_json("[" * 5000 + "]" * 5000)


def test_decode_json_accepts_plain_json():
    assert decode_json(b'{"a": [1, 2.5, null, true]}') == {"a": [1, 2.5, None, True]}
