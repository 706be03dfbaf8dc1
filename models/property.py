# models/property.py
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class Property(Base):
     """
     Property model - a building that contains rentable units.

     Units are not removed by a database cascade; deleting a property goes
     through services.inventory_service.delete_property, which walks
     units -> bedrooms -> leases -> invoices explicitly.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)
     status = Column(String(50), default="Active", nullable=False)

     # Address
     street = Column(String(255), nullable=True)
     city = Column(String(100), nullable=True)
     state = Column(String(100), nullable=True)
     postal_code = Column(String(20), nullable=True)
     country = Column(String(100), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     units = relationship("Unit", back_populates="property", order_by="Unit.id")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}')>"
