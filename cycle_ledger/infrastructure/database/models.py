"""SQLAlchemy ORM models for users, cycles and costs"""

import uuid
from sqlalchemy import Column, String, BigInteger, Float, DateTime, Date, Integer, ForeignKey, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def new_record_id() -> str:
    return str(uuid.uuid4())


class UserRecord(Base):
    """Admin or operator account"""

    __tablename__ = "ledger_user"

    id = Column(Text, primary_key=True, default=new_record_id)
    name = Column(Text, nullable=False)
    username = Column(String(120), nullable=False, unique=True, index=True)
    role = Column(Text, nullable=False)
    commission_rate = Column(Float, nullable=False, default=0.0)
    parent_id = Column(Text, ForeignKey("ledger_user.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CycleRecord(Base):
    """Completed capital operation; raw money in cents"""

    __tablename__ = "ledger_cycle"

    id = Column(Text, primary_key=True, default=new_record_id)
    name = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    deposit_cents = Column(BigInteger, nullable=False, default=0)
    redeposit_cents = Column(BigInteger, nullable=False, default=0)
    withdraw_cents = Column(BigInteger, nullable=False, default=0)
    chest_cents = Column(BigInteger, nullable=False, default=0)
    cooperation_cents = Column(BigInteger, nullable=False, default=0)
    accounts = Column(Integer, nullable=False, default=1)
    # Display cache only; cycles are re-normalized on every load
    profit_cents = Column(BigInteger, nullable=True)
    # No FK: records outlive a deleted operator
    operator_id = Column(Text, nullable=False, index=True)
    operator_name = Column(Text, nullable=False)
    owner_admin_id = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CostRecord(Base):
    """Operating expense"""

    __tablename__ = "ledger_cost"

    id = Column(Text, primary_key=True, default=new_record_id)
    name = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    category = Column(Text, nullable=False)
    operator_id = Column(Text, nullable=False, index=True)
    operator_name = Column(Text, nullable=False)
    owner_admin_id = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
