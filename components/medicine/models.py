"""Medicine price reference model for the database."""

from sqlalchemy import Column, Integer, String, Numeric

from components.core.database import Base


class MedicinePrice(Base):
    """Reference price of a medicine for one month of treatment."""
    __tablename__ = "medicine_prices"

    id = Column(Integer, primary_key=True, index=True)
    medicine_name = Column(String(100), unique=True, nullable=False)
    monthly_cost = Column(Numeric(10, 2), nullable=False)
    disease_type = Column(String(100), nullable=False, default="General")
