# models/transaction.py
"""
Transaction model - append-only financial ledger.

Each row carries the running balance (previous row's balance + amount), so the
ledger can be audited by replaying it in id order.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, func
from .base import Base, enum_values
from .enums import TransactionType


class Transaction(Base):
     __tablename__ = "transactions"

     id = Column(Integer, primary_key=True, autoincrement=True)
     date = Column(DateTime, server_default=func.now(), nullable=False)
     description = Column(String(255), nullable=False)
     type = Column(
          Enum(TransactionType, name="transaction_type", values_callable=enum_values, create_constraint=True),
          nullable=False
     )
     amount = Column(Numeric(12, 2), nullable=False)
     balance = Column(Numeric(14, 2), nullable=False)
     status = Column(String(50), default="Completed", nullable=False)
     lease_id = Column(Integer, ForeignKey("leases.id", ondelete="SET NULL"), nullable=True, index=True)
     invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="SET NULL"), nullable=True)

     def __repr__(self):
          return f"<Transaction(id={self.id}, type='{self.type.value}', amount={self.amount}, balance={self.balance})>"
