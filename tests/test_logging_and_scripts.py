import contextvars
import json
import logging
from unittest.mock import patch

from popup_pos.core.logging_setup import JsonFormatter
from popup_pos.core.request_context import (
    RequestContext,
    begin_request,
    bind_tenant,
    current_request_context,
    end_request,
)
from popup_pos.models.membership import Membership
from popup_pos.models.organization import Organization
from scripts import create_admin


def _record(message: str, *args) -> logging.LogRecord:
    return logging.LogRecord("popup_pos.test", logging.INFO, __file__, 1, message, args, None)


def test_json_formatter_includes_request_context_and_masks_secrets():
    token = begin_request("req-1")
    try:
        bind_tenant(3, "joes-coffee", 7)
        payload = json.loads(JsonFormatter("%(message)s").format(_record("login password=%s token=%s", "hunter2", "abc")))
    finally:
        end_request(token)

    assert payload["request_id"] == "req-1"
    assert payload["organization_id"] == 3
    assert payload["organization_slug"] == "joes-coffee"
    assert payload["user_id"] == 7
    assert payload["level"] == "INFO"
    assert "hunter2" not in payload["message"]
    assert "abc" not in payload["message"]
    assert payload["message"] == "login password=*** token=***"


def test_request_context_is_layered_and_restored():
    def scenario():
        assert current_request_context() == RequestContext()

        token = begin_request("req-2")
        try:
            assert current_request_context() == RequestContext(request_id="req-2")
            bound = bind_tenant(9, "teas-r-us", 4)
            assert bound.request_id == "req-2"
            assert current_request_context().organization_slug == "teas-r-us"
        finally:
            end_request(token)

        assert current_request_context() == RequestContext()
        return json.loads(JsonFormatter("%(message)s").format(_record("idle")))

    payload = contextvars.Context().run(scenario)

    assert payload["request_id"] is None
    assert payload["organization_id"] is None


def test_create_admin_script_creates_organization(session_factory, capsys):
    with patch.object(create_admin, "SessionLocal", session_factory):
        exit_code = create_admin.main(["joes-coffee", "Joe's Coffee", "admin", "password123"])

    assert exit_code == 0
    assert "Slug: joes-coffee" in capsys.readouterr().out
    db = session_factory()
    try:
        organization = db.query(Organization).filter(Organization.slug == "joes-coffee").one()
        assert db.query(Membership).filter(Membership.organization_id == organization.id).one().role == "owner"
    finally:
        db.close()


def test_create_admin_script_refuses_duplicates(session_factory, capsys):
    with patch.object(create_admin, "SessionLocal", session_factory):
        assert create_admin.main(["joes-coffee", "Joe's Coffee", "admin", "password123"]) == 0
        assert create_admin.main(["joes-coffee", "Joe's Again", "other", "password123"]) == 1

    assert "already taken" in capsys.readouterr().err
