from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from popup_pos.core.database import Base


class Modifier(Base):
    __tablename__ = "modifiers"

    id = Column(Integer, primary_key=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(50), nullable=False)
    position = Column(Integer, default=0, nullable=False)

    menu_item = relationship("MenuItem", back_populates="modifiers")
    options = relationship(
        "ModifierOption",
        back_populates="modifier",
        cascade="all, delete-orphan",
        order_by="ModifierOption.position",
    )
