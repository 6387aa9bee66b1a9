from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from popup_pos.core.database import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True)

    # Snapshots taken at order time; never recomputed.
    name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")
    modifiers = relationship(
        "OrderItemModifier",
        back_populates="order_item",
        cascade="all, delete-orphan",
        order_by="OrderItemModifier.id",
    )

    @property
    def subtotal_cents(self) -> int:
        return self.unit_price_cents * self.quantity
