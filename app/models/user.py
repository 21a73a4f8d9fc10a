"""
User and application tables.

Users are keyed by username. An application links a user to a job they
applied for; deleting either side removes the link.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, false
from app.core.database import Base


class User(Base):
    """User account. `password` holds the bcrypt hash, never the plain text."""
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"


class Application(Base):
    """A user's application to a job."""
    __tablename__ = "applications"

    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)

    def __repr__(self):
        return f"<Application(username='{self.username}', job_id={self.job_id})>"
