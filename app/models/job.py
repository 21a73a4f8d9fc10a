from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text, CheckConstraint
from app.core.database import Base


class Job(Base):
    """
    Job posting belonging to a company.

    `title` is unique and used as the lookup key by the API; `id` is what
    applications reference.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, unique=True, nullable=False, index=True)
    salary = Column(Integer, CheckConstraint("salary >= 0"), nullable=True)
    equity = Column(Numeric, CheckConstraint("equity <= 1.0"), nullable=True)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}')>"
