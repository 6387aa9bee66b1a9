from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from popup_pos.core.database import Base


class ModifierOption(Base):
    __tablename__ = "modifier_options"

    id = Column(Integer, primary_key=True)
    modifier_id = Column(Integer, ForeignKey("modifiers.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(50), nullable=False)
    price_adjustment_cents = Column(Integer, default=0, nullable=False)
    position = Column(Integer, default=0, nullable=False)

    modifier = relationship("Modifier", back_populates="options")
