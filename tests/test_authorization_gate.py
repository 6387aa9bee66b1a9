import pytest
from starlette.requests import Request

from popup_pos.core.errors import UnauthorizedError
from popup_pos.core.request_context import RequestContext, begin_request, current_request_context, end_request
from popup_pos.deps import require_org_session
from popup_pos.middleware.authorization_gate import GateDecision, classify_request
from popup_pos.services.sessions import SessionClaims
from tests.fixtures_data import login, seed_menu_item, seed_organization

ADMIN_REQUESTS = [
    ("GET", "/api/{org}/admin/menu"),
    ("POST", "/api/{org}/admin/menu"),
    ("PATCH", "/api/{org}/admin/menu/1"),
    ("DELETE", "/api/{org}/admin/menu/1"),
    ("GET", "/api/{org}/admin/settings"),
    ("PATCH", "/api/{org}/admin/settings"),
    ("POST", "/api/{org}/admin/upload"),
    ("GET", "/api/{org}/orders"),
    ("DELETE", "/api/{org}/orders"),
    ("PATCH", "/api/{org}/orders/1/status"),
]


def _build_request(path: str, claims=None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [],
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
        "scheme": "http",
    }
    request = Request(scope)
    request.state.session_claims = claims
    return request


@pytest.fixture
def two_shops(db):
    shop_a, _ = seed_organization(db, "shop-a", "Shop A", "alice")
    shop_b, _ = seed_organization(db, "shop-b", "Shop B", "bob")
    seed_menu_item(db, shop_b, "Bagel", 300)
    return shop_a, shop_b


@pytest.mark.parametrize(
    "method, path, expected",
    [
        ("GET", "/api/shop-a/menu", (GateDecision.PUBLIC, "shop-a")),
        ("POST", "/api/shop-a/orders", (GateDecision.PUBLIC, "shop-a")),
        ("GET", "/api/shop-a/orders", (GateDecision.API, "shop-a")),
        ("DELETE", "/api/shop-a/orders", (GateDecision.API, "shop-a")),
        ("PATCH", "/api/shop-a/orders/4/status", (GateDecision.API, "shop-a")),
        ("GET", "/api/shop-a/admin/settings", (GateDecision.API, "shop-a")),
        ("POST", "/api/shop-a/auth/login", (GateDecision.PUBLIC, "shop-a")),
        ("POST", "/api/auth/login", (GateDecision.PUBLIC, "auth")),
        ("POST", "/api/register", (GateDecision.PUBLIC, None)),
        ("GET", "/shop-a/admin", (GateDecision.PAGE, "shop-a")),
        ("GET", "/shop-a/orders/today", (GateDecision.PAGE, "shop-a")),
        ("GET", "/shop-a/menu", (GateDecision.PUBLIC, None)),
        ("GET", "/health", (GateDecision.PUBLIC, None)),
    ],
)
def test_classify_request(method, path, expected):
    assert classify_request(method, path) == expected


@pytest.mark.parametrize("method, template", ADMIN_REQUESTS)
def test_session_of_shop_a_is_rejected_on_every_admin_path_of_shop_b(client, two_shops, method, template):
    login(client, "shop-a", "alice")

    response = client.request(method, template.format(org="shop-b"), follow_redirects=False)

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized", "code": "UNAUTHORIZED"}


@pytest.mark.parametrize("method, template", ADMIN_REQUESTS)
def test_missing_session_is_rejected_the_same_way(client, two_shops, method, template):
    response = client.request(method, template.format(org="shop-b"), follow_redirects=False)

    assert response.status_code == 401
    assert response.json() == {"detail": "Unauthorized", "code": "UNAUTHORIZED"}


def test_page_navigation_redirects_to_org_login(client, two_shops):
    login(client, "shop-a", "alice")

    response = client.get("/shop-b/admin", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/shop-b/login"


def test_tampered_cookie_is_treated_as_missing(client, two_shops):
    login(client, "shop-a", "alice")
    token = client.cookies.get("session")
    tampered = token[:-2] + ("aa" if not token.endswith("aa") else "bb")
    client.cookies.clear()
    client.cookies.set("session", tampered)

    response = client.get("/api/shop-a/admin/menu")

    assert response.status_code == 401


def test_own_admin_paths_are_allowed(client, two_shops):
    login(client, "shop-b", "bob")

    response = client.get("/api/shop-b/admin/menu")

    assert response.status_code == 200
    assert [item["name"] for item in response.json()] == ["Bagel"]


def test_public_paths_need_no_session(client, two_shops):
    assert client.get("/api/shop-b/menu").status_code == 200


def test_dependency_rejects_mismatched_slug():
    claims = SessionClaims(user_id=1, organization_id=1, organization_slug="shop-a")

    with pytest.raises(UnauthorizedError):
        require_org_session("shop-b", _build_request("/api/shop-b/admin/menu", claims))


def test_dependency_rejects_missing_session():
    with pytest.raises(UnauthorizedError):
        require_org_session("shop-a", _build_request("/api/shop-a/admin/menu"))


def test_dependency_supplies_claims_for_matching_slug():
    claims = SessionClaims(user_id=3, organization_id=9, organization_slug="shop-a")

    token = begin_request("req-gate")
    try:
        resolved = require_org_session("shop-a", _build_request("/api/shop-a/admin/menu", claims))
        bound = current_request_context()
    finally:
        end_request(token)

    assert resolved.organization_id == 9
    assert resolved == claims
    assert bound == RequestContext(request_id="req-gate", organization_id=9, organization_slug="shop-a", user_id=3)
