"""Tests for response classification."""

import pytest
from httpx import Response

from hclient.errors.exceptions import (
    AuthError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from hclient.errors.handler import is_auth_failure, parse_payload, raise_for_status, unwrap_envelope


@pytest.mark.unit
def test_raise_for_status_success_response():
    """Test raise_for_status doesn't raise for successful responses."""
    response = Response(status_code=200)

    # Should not raise
    raise_for_status(response)


@pytest.mark.unit
def test_raise_for_status_400_is_validation_error():
    response = Response(
        status_code=400,
        json={
            "result": "400",
            "desc": "required fields missing: name",
            "errors": [{"field": "name", "message": "required"}],
        },
    )

    with pytest.raises(ValidationError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.status_code == 400
    assert exc_info.value.response == response
    assert exc_info.value.validation_errors == [{"field": "name", "message": "required"}]
    assert "required fields missing: name" in str(exc_info.value)


@pytest.mark.unit
def test_raise_for_status_422_is_validation_error():
    response = Response(status_code=422, text="Unprocessable")

    with pytest.raises(ValidationError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.status_code == 422
    assert exc_info.value.validation_errors == []


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [401, 403])
def test_raise_for_status_auth_errors(status_code):
    response = Response(status_code=status_code, text="denied")

    with pytest.raises(AuthError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.status_code == status_code


@pytest.mark.unit
def test_raise_for_status_404_not_found():
    """Test raise_for_status raises NotFoundError for 404."""
    response = Response(status_code=404, json={"result": "404", "desc": "record R1 not found"})

    with pytest.raises(NotFoundError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail.message == "record R1 not found"


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [409, 418, 429, 500, 503])
def test_raise_for_status_other_statuses_are_upstream_errors(status_code):
    response = Response(status_code=status_code, json={"result": "E42", "desc": "boom"})

    with pytest.raises(UpstreamError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.status_code == status_code
    assert exc_info.value.upstream_code == "E42"


@pytest.mark.unit
def test_raise_for_status_plain_text_error():
    """Test raise_for_status handles plain text errors."""
    response = Response(
        status_code=500,
        headers={"content-type": "text/plain"},
        text="Internal Server Error",
    )

    with pytest.raises(UpstreamError) as exc_info:
        raise_for_status(response)

    assert str(exc_info.value) == "HTTP 500: Internal Server Error"
    assert exc_info.value.upstream_code is None


@pytest.mark.unit
def test_raise_for_status_truncates_long_text():
    response = Response(status_code=502, text="x" * 500)

    with pytest.raises(UpstreamError) as exc_info:
        raise_for_status(response)

    assert str(exc_info.value) == "HTTP 502: " + "x" * 200


@pytest.mark.unit
def test_raise_for_status_empty_body():
    response = Response(status_code=500)

    with pytest.raises(UpstreamError) as exc_info:
        raise_for_status(response)

    assert str(exc_info.value) == "HTTP 500"


@pytest.mark.unit
def test_is_auth_failure_only_for_401():
    assert is_auth_failure(Response(status_code=401))
    assert not is_auth_failure(Response(status_code=403))
    assert not is_auth_failure(Response(status_code=200))


@pytest.mark.unit
def test_unwrap_envelope_returns_data():
    response = Response(200, json={"result": "0", "desc": "success", "data": {"code": "R1"}})

    assert unwrap_envelope(response) == {"code": "R1"}


@pytest.mark.unit
def test_unwrap_envelope_failing_result_on_2xx():
    response = Response(200, json={"result": "1003", "desc": "object is locked"})

    with pytest.raises(UpstreamError) as exc_info:
        unwrap_envelope(response)

    assert exc_info.value.status_code == 200
    assert exc_info.value.upstream_code == "1003"
    assert "object is locked" in str(exc_info.value)


@pytest.mark.unit
def test_unwrap_envelope_numeric_success_result():
    response = Response(200, json={"result": 0, "data": [1, 2]})

    assert unwrap_envelope(response) == [1, 2]


@pytest.mark.unit
def test_unwrap_envelope_without_envelope_returns_body():
    response = Response(200, json=[{"metaName": "lead"}])

    assert unwrap_envelope(response) == [{"metaName": "lead"}]


@pytest.mark.unit
def test_unwrap_envelope_empty_body():
    assert unwrap_envelope(Response(204)) is None


@pytest.mark.unit
def test_unwrap_envelope_non_json_body():
    response = Response(200, text="<html>maintenance</html>")

    with pytest.raises(UpstreamError):
        unwrap_envelope(response)


@pytest.mark.unit
def test_unwrap_envelope_raises_for_status_first():
    response = Response(404, json={"result": "404", "desc": "gone"})

    with pytest.raises(NotFoundError):
        unwrap_envelope(response)


def test_parse_payload_returns_parsed_value():
    assert parse_payload(int, "42", "counter") == 42


@pytest.mark.parametrize("data", [None, "x", {}])
def test_parse_payload_wraps_shape_errors(data):
    def parse(value):
        return value["key"].upper()

    with pytest.raises(UpstreamError, match="malformed widget") as exc_info:
        parse_payload(parse, data, "widget")

    assert isinstance(exc_info.value.__cause__, (KeyError, TypeError))
