from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from popup_pos.core.database import Base


class OrderItemModifier(Base):
    __tablename__ = "order_item_modifiers"

    id = Column(Integer, primary_key=True)
    order_item_id = Column(Integer, ForeignKey("order_items.id", ondelete="CASCADE"), index=True, nullable=False)
    modifier_option_id = Column(Integer, ForeignKey("modifier_options.id", ondelete="SET NULL"), nullable=True)

    modifier_name = Column(String(50), nullable=False)
    name = Column(String(50), nullable=False)
    price_adjustment_cents = Column(Integer, nullable=False)

    order_item = relationship("OrderItem", back_populates="modifiers")
