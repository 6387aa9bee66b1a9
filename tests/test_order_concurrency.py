from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from popup_pos.core.database import Base
from popup_pos.models.order import Order
from popup_pos.models.order_item import OrderItem
from popup_pos.schemas.orders import OrderLineRequest
from popup_pos.services.orders import place_order
from tests.fixtures_data import seed_menu_item, seed_organization

CONCURRENT_ORDERS = 12


def test_concurrent_orders_get_unique_numbers_and_keep_their_items(tmp_path: Path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'orders.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    seed = factory()
    organization, _user = seed_organization(seed, "joes-coffee", "Joe's Coffee", "joe")
    latte = seed_menu_item(seed, organization, "Latte", 450)
    muffin = seed_menu_item(seed, organization, "Muffin", 300)
    latte_id, muffin_id = latte.id, muffin.id
    seed.close()

    def submit(index: int) -> int:
        session = factory()
        try:
            order = place_order(
                session,
                "joes-coffee",
                f"Customer {index}",
                [
                    OrderLineRequest(menu_item_id=latte_id, quantity=1),
                    OrderLineRequest(menu_item_id=muffin_id, quantity=2),
                ],
            )
            return order.number
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=6) as pool:
        numbers = list(pool.map(submit, range(CONCURRENT_ORDERS)))

    assert sorted(numbers) == list(range(1, CONCURRENT_ORDERS + 1))

    check = factory()
    try:
        assert check.query(Order).count() == CONCURRENT_ORDERS
        assert check.query(OrderItem).count() == CONCURRENT_ORDERS * 2
        assert all(order.total_cents == 1050 for order in check.query(Order).all())
    finally:
        check.close()
        engine.dispose()
