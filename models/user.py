# models/user.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, enum_values
from .enums import UserRole


class User(Base):
     """
     User model - admins, owners and tenants share one table.

     For tenants, ``building_id`` / ``unit_id`` / ``bedroom_id`` cache where
     the tenant currently lives. The leases table is authoritative; these
     columns are rewritten by services.tenant_cache.refresh_tenant_cache in
     the same transaction as every lease change and never from request input.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=True, index=True)
     first_name = Column(String(100), nullable=True)
     last_name = Column(String(100), nullable=True)
     phone = Column(String(50), nullable=True)
     role = Column(
          Enum(UserRole, name="user_role", values_callable=enum_values, create_constraint=True),
          default=UserRole.TENANT,
          nullable=False
     )

     # Occupancy cache (tenants only)
     building_id = Column(Integer, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True)
     unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True)
     bedroom_id = Column(Integer, ForeignKey("bedrooms.id", ondelete="SET NULL"), nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     leases = relationship("Lease", back_populates="tenant", foreign_keys="Lease.tenant_id")
     invoices = relationship("Invoice", back_populates="tenant")

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"

     @property
     def name(self) -> str:
          return f"{self.first_name or ''} {self.last_name or ''}".strip()
