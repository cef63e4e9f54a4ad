from sqlalchemy import Column, String, Float, DateTime, Text, Enum
from datetime import datetime
from .database import Base
from .quote_calculator import QuantityBasis


class Service(Base):
    """Billable service in the catalog. Quotes are computed, never stored."""
    __tablename__ = "services"

    id = Column(String, primary_key=True)  # slug, e.g. "leak-detection"
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    category = Column(String, nullable=True, index=True)
    unit = Column(String, nullable=False, default="flat")  # display label only
    rate = Column(Float, nullable=False, default=0.0)
    quantity_basis = Column(Enum(QuantityBasis), nullable=False, default=QuantityBasis.FLAT)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
