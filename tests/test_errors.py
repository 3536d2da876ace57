import pytest

from huma import errors
from huma.errors import ErrorDetail, ErrorModel, StatusError


def test_error_model_add_and_messages():
    err = ErrorModel(status=400, detail="test err")
    err.add(ErrorDetail(message="test detail", location="body.foo", value="bar"))
    err.add(ValueError("plain error"))

    assert str(err) == "test err"
    assert len(err.errors) == 2
    assert str(err.errors[0]) == "test detail (body.foo: bar)"
    assert str(err.errors[1]) == "plain error"


def test_error_model_content_types():
    err = ErrorModel(status=400, detail="test err")
    assert err.content_type("application/json") == "application/problem+json"
    assert err.content_type("application/cbor") == "application/problem+cbor"
    assert err.content_type("other") == "other"


def test_status_304():
    assert errors.status_304_not_modified().status == 304


@pytest.mark.parametrize(
    "constructor, expected",
    [
        (errors.error_400_bad_request, 400),
        (errors.error_401_unauthorized, 401),
        (errors.error_403_forbidden, 403),
        (errors.error_404_not_found, 404),
        (errors.error_405_method_not_allowed, 405),
        (errors.error_406_not_acceptable, 406),
        (errors.error_409_conflict, 409),
        (errors.error_410_gone, 410),
        (errors.error_412_precondition_failed, 412),
        (errors.error_415_unsupported_media_type, 415),
        (errors.error_422_unprocessable_entity, 422),
        (errors.error_429_too_many_requests, 429),
        (errors.error_500_internal_server_error, 500),
        (errors.error_501_not_implemented, 501),
        (errors.error_502_bad_gateway, 502),
        (errors.error_503_service_unavailable, 503),
        (errors.error_504_gateway_timeout, 504),
    ],
)
def test_error_responses(constructor, expected):
    err = constructor("test")
    assert err.status == expected
    assert str(err) == "test"


def test_new_error_fills_title_and_details():
    detail = ErrorDetail(message="expected boolean", location="body.active", value=5)
    err = errors.new_error(422, "validation failed", detail, RuntimeError("boom"), None)
    assert err.title == "Unprocessable Entity"
    assert err.detail == "validation failed"
    assert err.errors[0] is detail
    assert err.errors[1].message == "boom"
    assert len(err.errors) == 2


def test_new_error_is_raisable_status_error():
    err = errors.error_404_not_found("missing")
    assert err.title == "Not Found"
    with pytest.raises(StatusError) as info:
        raise err
    assert info.value is err
    assert info.value.status == 404
    assert str(info.value) == "missing"


def test_error_detail_without_location_or_value():
    assert str(ErrorDetail(message="only message")) == "only message"


def test_error_detail_formats_missing_value_and_bool():
    assert str(ErrorDetail(message="m", location="path.id")) == "m (path.id: <nil>)"
    assert str(ErrorDetail(message="m", location="q", value=True)) == "m (q: true)"


def test_error_detail_returns_itself():
    detail = ErrorDetail(message="x")
    assert detail.error_detail() is detail


def test_add_uses_custom_detail_provider():
    class Custom(Exception):
        def error_detail(self):
            return ErrorDetail(message="custom", location="header.x")

    err = ErrorModel(status=400)
    err.add(Custom("ignored"))
    assert err.errors[0].message == "custom"
    assert err.errors[0].location == "header.x"


@pytest.mark.parametrize(
    "status, text",
    [(200, "OK"), (413, "Request Entity Too Large"), (422, "Unprocessable Entity"), (999, "")],
)
def test_status_text(status, text):
    assert errors.status_text(status) == text


def test_status_304_has_title_and_empty_detail():
    err = errors.status_304_not_modified()
    assert err.title == "Not Modified"
    assert err.detail == ""
    assert err.errors == []