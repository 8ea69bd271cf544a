# tests/test_client.py
"""Tests for the httpx wrapper around the accounting backend."""

from dataclasses import replace

import httpx
import pytest

from ledgerdraft.client import BackendAPIError, create_client, extract_error_message, request_json
from ledgerdraft.storage import save_token


def _client(settings, handler, **kwargs):
    return create_client(settings, transport=httpx.MockTransport(handler), **kwargs)


class TestErrorMessage:

    def test_message_field(self):
        assert extract_error_message({"message": "Voucher number already exists"}) == (
            "Voucher number already exists"
        )

    def test_detail_string(self):
        assert extract_error_message({"detail": "Not authenticated"}) == "Not authenticated"

    def test_detail_list_is_joined(self):
        body = {"detail": [{"msg": "field required"}, {"msg": "value is not a valid integer"}]}

        assert extract_error_message(body) == "field required, value is not a valid integer"

    def test_fallback(self):
        assert extract_error_message(None, "Failed to create voucher") == "Failed to create voucher"
        assert extract_error_message({"detail": []}, "x") == "x"


class TestCreateClient:

    def test_headers(self, settings):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["tenant"] = request.headers.get("X-Tenant-ID")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"success": True, "data": {}})

        with _client(settings, handler) as client:
            request_json(client, "GET", "/api/v1/account/vouchers")

        assert seen == {
            "auth": "Bearer secret-token",
            "tenant": "7",
            "url": "http://backend.test/api/v1/account/vouchers",
        }

    def test_saved_session_token_is_used(self, settings, tmp_path):
        save_token("from-session", tenant_id=7, path=settings.token_file)
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"success": True})

        with _client(replace(settings, api_token=""), handler) as client:
            request_json(client, "GET", "/ping")

        assert seen["auth"] == "Bearer from-session"

    def test_no_token_no_header(self, settings):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"success": True})

        with _client(replace(settings, api_token=""), handler) as client:
            request_json(client, "GET", "/ping")

        assert seen["auth"] is None

    def test_missing_base_url(self, settings):
        with pytest.raises(ValueError):
            create_client(replace(settings, base_url=""))


class TestResponses:

    def test_envelope_is_returned(self, settings):
        def handler(request):
            return httpx.Response(201, json={"success": True, "message": "Created", "data": {"id": 3}})

        with _client(settings, handler) as client:
            body = request_json(client, "POST", "/api/v1/account/vouchers", json={})

        assert body["data"] == {"id": 3}
        assert body["message"] == "Created"

    def test_bare_body_is_wrapped(self, settings):
        def handler(request):
            return httpx.Response(200, json={"id": 3, "po_number": "PO-1"})

        with _client(settings, handler) as client:
            body = request_json(client, "POST", "/api/v1/inventory/purchase-orders", json={})

        assert body == {"success": True, "message": "", "data": {"id": 3, "po_number": "PO-1"}}

    def test_http_error(self, settings):
        def handler(request):
            return httpx.Response(400, json={"detail": [{"msg": "supplier_id: field required"}]})

        with _client(settings, handler) as client:
            with pytest.raises(BackendAPIError) as excinfo:
                request_json(client, "POST", "/api/v1/inventory/purchase-orders", json={})

        assert excinfo.value.status == 400
        assert excinfo.value.message == "supplier_id: field required"
        assert excinfo.value.details == {"detail": [{"msg": "supplier_id: field required"}]}

    def test_success_false(self, settings):
        def handler(request):
            return httpx.Response(200, json={"success": False, "message": "Period is closed"})

        with _client(settings, handler) as client:
            with pytest.raises(BackendAPIError) as excinfo:
                request_json(client, "POST", "/api/v1/account/vouchers", json={})

        assert excinfo.value.message == "Period is closed"

    def test_non_json_error(self, settings):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        with _client(settings, handler) as client:
            with pytest.raises(BackendAPIError) as excinfo:
                request_json(client, "GET", "/ping")

        assert excinfo.value.status == 502
        assert excinfo.value.message == "Request to the accounting backend failed"

    def test_network_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(settings, handler) as client:
            with pytest.raises(BackendAPIError) as excinfo:
                request_json(client, "GET", "/ping")

        assert excinfo.value.status is None
        assert excinfo.value.message == "connection refused"
