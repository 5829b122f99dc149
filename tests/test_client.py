import pytest
import requests

from conftest import make_response
from student_portal.api.client import APIClient, student_id_param
from student_portal.errors import HttpError, NetworkFailure


def test_request_builds_url_and_headers(client, http):
    http.request.return_value = make_response(200, {})
    client.request("GET", "/students/5/personal", headers={"Authorization": "Bearer t"})

    args, kwargs = http.request.call_args
    assert args == ("GET", "http://portal.test/students/5/personal")
    assert kwargs["headers"]["Authorization"] == "Bearer t"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["timeout"] == 5


def test_base_url_trailing_slash_is_dropped(http):
    c = APIClient(base_url="http://portal.test/", session=http)
    assert c.base_url == "http://portal.test"


def test_transport_error_becomes_network_failure(client, http):
    http.request.side_effect = requests.Timeout("slow")
    with pytest.raises(NetworkFailure):
        client.request("GET", "/x")


def test_fetch_json_success(client, http):
    http.request.return_value = make_response(200, [{"id": 1}])
    assert client.fetch_json("GET", "/x", "Failed") == [{"id": 1}]


@pytest.mark.parametrize("resp,message", [
    (make_response(404, {"error": "Student not found"}), "Student not found"),
    (make_response(500, {"msg": "x"}), "Failed: 500"),
    (make_response(503, text="down"), "Failed"),
])
def test_fetch_json_errors(client, http, resp, message):
    http.request.return_value = resp
    with pytest.raises(HttpError) as ei:
        client.fetch_json("GET", "/x", "Failed")
    assert ei.value.status == resp.status_code
    assert ei.value.message == message


def test_success_with_invalid_json(client, http):
    http.request.return_value = make_response(200, text="ok")
    with pytest.raises(HttpError):
        client.fetch_json("GET", "/x", "Failed")


@pytest.mark.parametrize("raw,expected", [("123456", 123456), (" 42 ", 42), ("12ab", "12ab"), ("12³", "12³"), ("²", "²"), ("٣", "٣"), ("", "")])
def test_student_id_param(raw, expected):
    assert student_id_param(raw) == expected
