from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import relationship

from popup_pos.core.database import Base


class MenuItem(Base):
    __tablename__ = "menu_items"
    __table_args__ = (Index("ix_menu_items_organization_available", "organization_id", "available"),)

    id = Column(Integer, primary_key=True)
    organization_id = Column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), index=True, nullable=False
    )
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    price_cents = Column(Integer, nullable=False)
    allergens = Column(Text, nullable=True)
    available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    modifiers = relationship(
        "Modifier",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by="Modifier.position",
    )
