from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from popup_pos.core.database import Base

STATUS_RECEIVED = "RECEIVED"
STATUS_PREPARING = "PREPARING"
STATUS_READY = "READY"
ORDER_STATUSES = (STATUS_RECEIVED, STATUS_PREPARING, STATUS_READY)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("organization_id", "number", name="uq_orders_organization_number"),
        Index("ix_orders_organization_created", "organization_id", "created_at"),
    )

    id = Column(Integer, primary_key=True)
    organization_id = Column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), index=True, nullable=False
    )
    number = Column(Integer, nullable=False)
    customer_name = Column(String(100), nullable=False)
    status = Column(String(20), default=STATUS_RECEIVED, nullable=False)  # RECEIVED / PREPARING / READY
    total_cents = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
