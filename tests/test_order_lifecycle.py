import pytest

from popup_pos.core.errors import NotFoundError, ValidationError
from popup_pos.models.order import Order
from popup_pos.models.order_item import OrderItem
from popup_pos.models.order_item_modifier import OrderItemModifier
from popup_pos.models.organization import Organization
from popup_pos.schemas.orders import OrderLineRequest
from popup_pos.services import order_lifecycle
from popup_pos.services.orders import place_order
from tests.fixtures_data import login, option_id, seed_menu_item, seed_organization


@pytest.fixture
def shop_with_order(db):
    organization, _user = seed_organization(db, "joes-coffee", "Joe's Coffee", "joe")
    latte = seed_menu_item(db, organization, "Latte", 450, modifiers={"Size": [("Small", 0), ("Large", 100)]})
    order = place_order(
        db,
        "joes-coffee",
        "Ana",
        [
            OrderLineRequest(
                menu_item_id=latte.id,
                quantity=2,
                modifiers=[{"option_id": option_id(latte, "Size", "Large")}],
            )
        ],
    )
    return organization, latte, order


def test_status_moves_forward_and_back(client, shop_with_order):
    _organization, _latte, order = shop_with_order
    login(client, "joes-coffee", "joe")

    ready = client.patch(f"/api/joes-coffee/orders/{order.id}/status", json={"status": "READY"})
    back = client.patch(f"/api/joes-coffee/orders/{order.id}/status", json={"status": "PREPARING"})

    assert ready.status_code == 200
    assert ready.json()["status"] == "READY"
    assert back.status_code == 200
    assert back.json()["status"] == "PREPARING"


def test_invalid_status_leaves_order_unchanged(client, db, shop_with_order):
    _organization, _latte, order = shop_with_order
    login(client, "joes-coffee", "joe")

    response = client.patch(f"/api/joes-coffee/orders/{order.id}/status", json={"status": "SHIPPED"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    db.expire_all()
    assert db.query(Order).filter(Order.id == order.id).one().status == "RECEIVED"


def test_repeating_the_current_status_is_a_noop(db, shop_with_order):
    organization, _latte, order = shop_with_order

    first = order_lifecycle.update_status(db, organization.id, order.id, "PREPARING")
    again = order_lifecycle.update_status(db, organization.id, order.id, "PREPARING")

    assert first.status == "PREPARING"
    assert again.status == "PREPARING"


@pytest.mark.parametrize("status", ["preparing", "Ready", " READY ", "READY\n", ""])
def test_status_must_match_exactly(db, shop_with_order, status):
    organization, _latte, order = shop_with_order

    with pytest.raises(ValidationError):
        order_lifecycle.update_status(db, organization.id, order.id, status)

    db.expire_all()
    assert db.query(Order).filter(Order.id == order.id).one().status == "RECEIVED"


def test_lowercase_status_is_rejected_by_the_api(client, db, shop_with_order):
    _organization, _latte, order = shop_with_order
    login(client, "joes-coffee", "joe")

    patched = client.patch(f"/api/joes-coffee/orders/{order.id}/status", json={"status": "ready"})
    listed = client.get("/api/joes-coffee/orders", params={"status": "ready"})

    assert patched.status_code == 400
    assert patched.json()["code"] == "VALIDATION_ERROR"
    assert listed.status_code == 400
    assert listed.json()["code"] == "VALIDATION_ERROR"
    db.expire_all()
    assert db.query(Order).filter(Order.id == order.id).one().status == "RECEIVED"


def test_out_of_range_order_id_reads_as_not_found(client, shop_with_order):
    login(client, "joes-coffee", "joe")

    response = client.patch(f"/api/joes-coffee/orders/{2**64}/status", json={"status": "READY"})

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_foreign_order_is_not_found_even_with_invalid_status(db, shop_with_order):
    _organization, _latte, order = shop_with_order
    other, _user = seed_organization(db, "teas-r-us", "Teas R Us", "tina")

    with pytest.raises(NotFoundError):
        order_lifecycle.update_status(db, other.id, order.id, "READY")
    with pytest.raises(NotFoundError):
        order_lifecycle.update_status(db, other.id, order.id, "BOGUS")

    db.expire_all()
    assert db.query(Order).filter(Order.id == order.id).one().status == "RECEIVED"


def test_invalid_status_raises_validation_error(db, shop_with_order):
    organization, _latte, order = shop_with_order

    with pytest.raises(ValidationError):
        order_lifecycle.update_status(db, organization.id, order.id, "DONE")


def test_admin_list_includes_snapshots_and_filters_by_status(client, db, shop_with_order):
    organization, latte, first = shop_with_order
    second = place_order(db, "joes-coffee", "Bo", [OrderLineRequest(menu_item_id=latte.id, quantity=1)])
    order_lifecycle.update_status(db, organization.id, first.id, "READY")
    login(client, "joes-coffee", "joe")

    everything = client.get("/api/joes-coffee/orders")
    ready_only = client.get("/api/joes-coffee/orders", params={"status": "READY"})

    assert everything.status_code == 200
    assert [order["number"] for order in everything.json()] == [second.number, first.number]
    assert [order["id"] for order in ready_only.json()] == [first.id]
    snapshot = ready_only.json()[0]["items"][0]
    assert snapshot["unit_price_cents"] == 550
    assert snapshot["modifiers"][0]["name"] == "Large"


def test_clear_all_removes_orders_but_keeps_numbering(client, db, shop_with_order):
    organization, latte, _order = shop_with_order
    other, _user = seed_organization(db, "teas-r-us", "Teas R Us", "tina")
    chai = seed_menu_item(db, other, "Chai", 400)
    place_order(db, "teas-r-us", "Cy", [OrderLineRequest(menu_item_id=chai.id, quantity=1)])
    login(client, "joes-coffee", "joe")

    response = client.delete("/api/joes-coffee/orders")

    assert response.status_code == 200
    assert response.json() == {"success": True, "deleted": 1}
    db.expire_all()
    assert db.query(Order).filter(Order.organization_id == organization.id).count() == 0
    assert db.query(Order).filter(Order.organization_id == other.id).count() == 1
    assert db.query(OrderItem).count() == 1
    assert db.query(OrderItemModifier).count() == 0
    assert db.query(Organization).filter(Organization.id == organization.id).one().last_order_number == 1

    next_order = place_order(db, "joes-coffee", "Dee", [OrderLineRequest(menu_item_id=latte.id, quantity=1)])
    assert next_order.number == 2
