from sqlalchemy import Column, Integer, String, Text, CheckConstraint
from app.core.database import Base


class Company(Base):
    """
    Company table. Rows are keyed by `handle`, a short caller-chosen slug.

    Queries against this table are written by hand in app/crud/company.py;
    the model only defines the schema.
    """
    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, unique=True, nullable=False)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"), nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Company(handle='{self.handle}', name='{self.name}')>"
