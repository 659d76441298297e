"""
Unit tests -- HTTP search backend over httpx.MockTransport (no live server).
"""
import httpx
import pytest

from src.search.backend import CONDITIONS_ENDPOINT, PROMPT_ENDPOINT, HttpSearchBackend
from src.search.dispatcher import Dispatcher, SearchRequest
from src.search.errors import SearchBackendError, SearchStatus


def _backend(handler) -> HttpSearchBackend:
    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://search.test")
    return HttpSearchBackend(client=client)


def test_fetch_returns_envelope():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"companies": [{"id": "1"}], "total": 1})

    body = _backend(handler).fetch(CONDITIONS_ENDPOINT, {"page": "2", "pageSize": "20", "conditions": "[]"})
    assert body["total"] == 1
    assert seen["path"] == CONDITIONS_ENDPOINT
    assert seen["params"] == {"page": "2", "pageSize": "20", "conditions": "[]"}


def test_error_message_taken_from_json_body():
    def handler(request):
        return httpx.Response(404, json={"message": "No companies found matching your conditions.", "success": False})

    with pytest.raises(SearchBackendError) as exc_info:
        _backend(handler).fetch(CONDITIONS_ENDPOINT, {})
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "No companies found matching your conditions."


def test_error_message_falls_back_to_text():
    def handler(request):
        return httpx.Response(503, text="Service Unavailable")

    with pytest.raises(SearchBackendError) as exc_info:
        _backend(handler).fetch(PROMPT_ENDPOINT, {})
    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Service Unavailable"


def test_network_failure_raises_backend_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SearchBackendError) as exc_info:
        _backend(handler).fetch(PROMPT_ENDPOINT, {})
    assert exc_info.value.status_code is None
    assert "connection refused" in exc_info.value.message


def test_non_json_body_raises():
    def handler(request):
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(SearchBackendError, match="non-JSON"):
        _backend(handler).fetch(PROMPT_ENDPOINT, {})


def test_dispatcher_over_http_404_is_no_results():
    def handler(request):
        return httpx.Response(404, json={"message": "No companies found for your search query."})

    outcome = Dispatcher(_backend(handler)).run(SearchRequest(prompt="quantum bakeries"))
    assert outcome.status is SearchStatus.NO_RESULTS


def test_dispatcher_over_http_500_is_error():
    def handler(request):
        return httpx.Response(500, json={"error": "upstream exploded"})

    outcome = Dispatcher(_backend(handler)).run(SearchRequest(prompt="fintech"))
    assert outcome.status is SearchStatus.ERROR
    assert "upstream exploded" in outcome.message
