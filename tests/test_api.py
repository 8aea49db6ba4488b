"""
HTTP-level tests: access control, redirects and the admin API.
"""
import asyncio
import logging

import pytest
from fastapi.testclient import TestClient

from shortlinks_app.exceptions import StoreUnavailableError

CHALLENGE = 'Basic realm="Admin Area"'


def add(client, auth_headers, slug, url):
    return client.post("/api/add", data={"slug": slug, "url": url}, headers=auth_headers)


class TestAccessControl:
    """Admin paths need credentials; public paths never do"""

    @pytest.mark.parametrize("method, path", [
        ("GET", "/admin"),
        ("GET", "/api/list"),
        ("POST", "/api/add"),
        ("POST", "/api/delete"),
        ("GET", "/api/add"),
        ("GET", "/api/unknown"),
        ("GET", "/apix"),
    ])
    def test_admin_paths_without_credentials(self, client: TestClient, method, path):
        response = client.request(method, path, follow_redirects=False)
        assert response.status_code == 401
        assert response.text == "Access Denied"
        assert response.headers["www-authenticate"] == CHALLENGE

    def test_wrong_password(self, client: TestClient, make_auth_headers):
        response = client.get("/api/list", headers=make_auth_headers("wrong"))
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == CHALLENGE

    def test_malformed_base64_is_401_not_500(self, client: TestClient):
        response = client.get("/api/list", headers={"Authorization": "Basic %%%not-base64"})
        assert response.status_code == 401

    def test_token_missing_after_scheme(self, client: TestClient):
        response = client.get("/api/list", headers={"Authorization": "Basic"})
        assert response.status_code == 401

    def test_any_username_accepted(self, client: TestClient, make_auth_headers):
        response = client.get("/api/list", headers=make_auth_headers("test-secret", username="someone"))
        assert response.status_code == 200

    def test_unauthenticated_add_does_not_mutate(self, client: TestClient, store):
        response = client.post("/api/add", data={"slug": "x", "url": "https://e.com"})
        assert response.status_code == 401
        assert asyncio.run(store.get("x")) is None

    @pytest.mark.parametrize("path", ["/x", "/admin/", "/Admin", "/nested/slug", "/xapi"])
    def test_public_paths_never_401(self, client: TestClient, path):
        response = client.get(path, follow_redirects=False)
        assert response.status_code in (301, 302, 404)


class TestRedirects:

    def test_root_redirects_to_fallback(self, client: TestClient):
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://fallback.example.com/"

    def test_known_slug_redirects_permanently(self, client: TestClient, store):
        asyncio.run(store.put("gh", "https://github.com/"))

        response = client.get("/gh", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "https://github.com/"

    def test_unknown_slug(self, client: TestClient):
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404
        assert response.text == "404 - Link not found"

    def test_slug_may_contain_slashes(self, client: TestClient, store):
        asyncio.run(store.put("docs/v1", "https://docs.example.com/v1"))

        response = client.get("/docs/v1", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "https://docs.example.com/v1"

    def test_redirect_ignores_method(self, client: TestClient, store):
        asyncio.run(store.put("x", "https://e.com"))
        response = client.post("/x", follow_redirects=False)
        assert response.status_code == 301


class TestAdminApi:

    def test_round_trip(self, client: TestClient, auth_headers):
        response = add(client, auth_headers, "x", "https://e.com")
        assert response.status_code == 200
        assert response.text == "Success"

        redirect = client.get("/x", follow_redirects=False)
        assert redirect.status_code == 301
        assert redirect.headers["location"] == "https://e.com"

        listing = client.get("/api/list", headers=auth_headers)
        assert {"slug": "x", "url": "https://e.com"} in listing.json()

    def test_add_overwrites(self, client: TestClient, auth_headers):
        add(client, auth_headers, "x", "https://first.com")
        add(client, auth_headers, "x", "https://second.com")

        listing = client.get("/api/list", headers=auth_headers).json()

        assert listing == [{"slug": "x", "url": "https://second.com"}]

    @pytest.mark.parametrize("data", [
        {"slug": "x"},
        {"url": "https://e.com"},
        {"slug": "", "url": "https://e.com"},
        {"slug": "x", "url": ""},
        {},
    ])
    def test_add_missing_data(self, client: TestClient, auth_headers, store, data):
        response = client.post("/api/add", data=data, headers=auth_headers)
        assert response.status_code == 400
        assert response.text == "Missing data"
        assert asyncio.run(store.list_keys(10)) == []

    def test_add_does_not_validate_url(self, client: TestClient, auth_headers, store):
        response = add(client, auth_headers, "odd", "not-a-url")
        assert response.status_code == 200
        assert asyncio.run(store.get("odd")) == "not-a-url"

    def test_delete_then_redirect_is_404(self, client: TestClient, auth_headers):
        add(client, auth_headers, "x", "https://e.com")

        response = client.post("/api/delete", data={"slug": "x"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.text == "Deleted"

        assert client.get("/x", follow_redirects=False).status_code == 404

    def test_delete_absent_slug(self, client: TestClient, auth_headers):
        response = client.post("/api/delete", data={"slug": "ghost"}, headers=auth_headers)
        assert response.status_code == 200

        listing = client.get("/api/list", headers=auth_headers)
        assert listing.json() == []

    def test_delete_missing_slug(self, client: TestClient, auth_headers):
        response = client.post("/api/delete", data={}, headers=auth_headers)
        assert response.status_code == 400
        assert response.text == "Missing data"

    def test_list_empty_store(self, client: TestClient, auth_headers):
        response = client.get("/api/list", headers=auth_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == []

    def test_list_order(self, client: TestClient, auth_headers):
        for slug in ["zeta", "alpha", "mid"]:
            add(client, auth_headers, slug, f"https://{slug}.com")

        slugs = [link["slug"] for link in client.get("/api/list", headers=auth_headers).json()]

        assert slugs == ["alpha", "mid", "zeta"]


class TestUnmatched:

    @pytest.mark.parametrize("method, path", [
        ("GET", "/api/add"),
        ("GET", "/api/delete"),
        ("GET", "/api/unknown"),
        ("GET", "/api"),
        ("POST", "/apix"),
    ])
    def test_unrouted_admin_requests(self, client: TestClient, auth_headers, method, path):
        response = client.request(method, path, headers=auth_headers)
        assert response.status_code == 400
        assert response.text == "Bad Request"


class TestDashboard:

    def test_dashboard_requires_auth(self, client: TestClient):
        assert client.get("/admin").status_code == 401

    def test_dashboard_served(self, client: TestClient, auth_headers):
        response = client.get("/admin", headers=auth_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/api/list" in response.text

    def test_dashboard_uses_request_hostname(self, client: TestClient, auth_headers):
        response = client.get("http://links.example.net/admin", headers=auth_headers)
        assert '"links.example.net"' in response.text


class FailingStore:
    """Every operation fails like an unreachable backend"""

    async def get(self, slug):
        raise StoreUnavailableError("get", "backend down")

    async def put(self, slug, url):
        raise StoreUnavailableError("put", "backend down")

    async def delete(self, slug):
        raise StoreUnavailableError("delete", "backend down")

    async def list_keys(self, limit):
        raise StoreUnavailableError("list", "backend down")

    async def close(self):
        pass


class TestStoreFailures:

    @pytest.fixture
    def failing_client(self, client):
        from main import app
        from shortlinks_app.dependencies import get_store

        app.dependency_overrides[get_store] = lambda: FailingStore()
        return client

    def test_redirect_on_store_failure(self, failing_client: TestClient):
        response = failing_client.get("/x", follow_redirects=False)
        assert response.status_code == 503
        assert response.text == "Service Unavailable"

    def test_add_on_store_failure(self, failing_client: TestClient, auth_headers):
        response = add(failing_client, auth_headers, "x", "https://e.com")
        assert response.status_code == 503

    def test_auth_still_checked_first(self, failing_client: TestClient):
        assert failing_client.get("/api/list").status_code == 401


class TestNonStandardMethods:
    """Methods outside the usual set still go through classification and auth"""

    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND", "FROB"])
    @pytest.mark.parametrize("path", ["/admin", "/api/list", "/api/add", "/api/unknown"])
    def test_admin_paths_challenge_without_credentials(self, client: TestClient, method, path):
        response = client.request(method, path)
        assert response.status_code == 401
        assert response.text == "Access Denied"
        assert response.headers["www-authenticate"] == CHALLENGE

    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND"])
    def test_unknown_slug_is_404(self, client: TestClient, method):
        response = client.request(method, "/x", follow_redirects=False)
        assert response.status_code == 404
        assert response.text == "404 - Link not found"

    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND"])
    def test_known_slug_redirects(self, client: TestClient, store, method):
        asyncio.run(store.put("x", "https://e.com"))
        response = client.request(method, "/x", follow_redirects=False)
        assert response.status_code == 301
        assert response.headers["location"] == "https://e.com"

    def test_dashboard_with_credentials(self, client: TestClient, auth_headers):
        response = client.request("PROPFIND", "/admin", headers=auth_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")

    def test_list_with_credentials(self, client: TestClient, auth_headers):
        response = client.request("TRACE", "/api/list", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("path", ["/api/add", "/api/delete", "/api/unknown"])
    def test_unmatched_with_credentials_is_400(self, client: TestClient, auth_headers, path):
        response = client.request("PROPFIND", path, headers=auth_headers)
        assert response.status_code == 400
        assert response.text == "Bad Request"


class TestAccessLog:

    def test_denied_admin_request(self, client: TestClient, caplog):
        with caplog.at_level(logging.INFO, logger="shortlinks_app.access"):
            client.get("/api/list")
        assert "GET /api/list [api_list] access=denied -> 401" in caplog.text

    def test_granted_admin_request(self, client: TestClient, auth_headers, caplog):
        with caplog.at_level(logging.INFO, logger="shortlinks_app.access"):
            client.get("/api/list", headers=auth_headers)
        assert "[api_list] access=granted -> 200" in caplog.text

    def test_public_request_has_no_access_field(self, client: TestClient, caplog):
        with caplog.at_level(logging.INFO, logger="shortlinks_app.access"):
            client.get("/nope", follow_redirects=False)
        line = next(r.getMessage() for r in caplog.records if r.name == "shortlinks_app.access")
        assert "[public_redirect] -> 404" in line
        assert "access=" not in line

    def test_credentials_never_logged(self, client: TestClient, auth_headers, caplog):
        with caplog.at_level(logging.DEBUG):
            client.get("/api/list", headers=auth_headers)
        assert auth_headers["Authorization"].split()[1] not in caplog.text
