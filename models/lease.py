# models/lease.py
from sqlalchemy import (
     Column, Integer, Numeric, Date, DateTime, ForeignKey, Enum, Index, func, text
)
from sqlalchemy.orm import relationship
from .base import Base, enum_values
from .enums import LeaseStatus


class Lease(Base):
     """
     Lease model - the contract between one tenant and one unit.

     ``bedroom_id`` NULL means the whole unit is leased. A DRAFT lease is a
     reservation without finalized dates or rent; MOVED leases are kept as
     history after the tenant relocated.

     The two partial unique indexes make the database itself reject a second
     Active lease on the same bedroom, or a second Active full-unit lease on
     the same unit.
     """
     __tablename__ = "leases"
     __table_args__ = (
          Index(
               "uq_leases_active_bedroom",
               "bedroom_id",
               unique=True,
               sqlite_where=text("status = 'Active' AND bedroom_id IS NOT NULL"),
               postgresql_where=text("status = 'Active' AND bedroom_id IS NOT NULL"),
               mssql_where=text("status = 'Active' AND bedroom_id IS NOT NULL"),
          ),
          Index(
               "uq_leases_active_full_unit",
               "unit_id",
               unique=True,
               sqlite_where=text("status = 'Active' AND bedroom_id IS NULL"),
               postgresql_where=text("status = 'Active' AND bedroom_id IS NULL"),
               mssql_where=text("status = 'Active' AND bedroom_id IS NULL"),
          ),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)
     bedroom_id = Column(Integer, ForeignKey("bedrooms.id"), nullable=True, index=True)
     tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

     status = Column(
          Enum(LeaseStatus, name="lease_status", values_callable=enum_values, create_constraint=True),
          default=LeaseStatus.DRAFT,
          nullable=False,
          index=True
     )

     # Lease period (unset while DRAFT)
     start_date = Column(Date, nullable=True)
     end_date = Column(Date, nullable=True)

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=True)
     security_deposit = Column(Numeric(12, 2), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     unit = relationship("Unit", back_populates="leases")
     bedroom = relationship("Bedroom", back_populates="leases")
     tenant = relationship("User", back_populates="leases", foreign_keys=[tenant_id])
     invoices = relationship("Invoice", back_populates="lease")

     def __repr__(self):
          return (
               f"<Lease(id={self.id}, tenant_id={self.tenant_id}, unit_id={self.unit_id}, "
               f"bedroom_id={self.bedroom_id}, status='{self.status.value}')>"
          )

     @property
     def is_full_unit(self) -> bool:
          return self.bedroom_id is None
