"""SQLAlchemy models for pockettrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


# Every table keeps an integer surrogate key for insertion order next to the
# opaque string identifier the rest of the application uses.


class User(Base):
    """Local user model."""

    __tablename__ = "users"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    is_guest = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False)
    category_id = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_months = Column(Integer, nullable=True)
    recurring_series_id = Column(String, nullable=True, index=True)


class ScheduledBill(Base):
    """Scheduled bill definition model."""

    __tablename__ = "scheduled_bills"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category_id = Column(String, nullable=False)
    due_day = Column(Integer, nullable=False)
    recurring_months = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    series_id = Column(String, nullable=False, index=True)


class ScheduledBillInstance(Base):
    """Scheduled bill instance model."""

    __tablename__ = "scheduled_bill_instances"

    pk = Column(Integer, primary_key=True)
    id = Column(String, unique=True, nullable=False, index=True)
    bill_id = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category_id = Column(String, nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="pending")
    series_id = Column(String, nullable=False, index=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
