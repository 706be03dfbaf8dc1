# models/unit.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, enum_values
from .enums import RentalMode, UnitStatus


class Unit(Base):
     """
     Unit model - a rentable apartment inside a property.

     ``status`` and ``rental_mode`` are owned by the occupancy synchronizer
     (services.occupancy_service); every other code path treats them as
     read-only.
     """
     __tablename__ = "units"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)

     unit_number = Column(String(50), nullable=False)
     unit_type = Column(String(100), nullable=True)
     floor = Column(Integer, nullable=True)
     rental_mode = Column(
          Enum(RentalMode, name="rental_mode", values_callable=enum_values, create_constraint=True),
          default=RentalMode.FULL_UNIT,
          nullable=False
     )
     status = Column(
          Enum(UnitStatus, name="unit_status", values_callable=enum_values, create_constraint=True),
          default=UnitStatus.VACANT,
          nullable=False,
          index=True
     )
     bedroom_count = Column(Integer, default=0, nullable=False)
     rent_amount = Column(Numeric(12, 2), default=0, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="units")
     bedrooms = relationship("Bedroom", back_populates="unit", order_by="Bedroom.room_number")
     leases = relationship("Lease", back_populates="unit")

     def __repr__(self):
          return f"<Unit(id={self.id}, unit_number='{self.unit_number}', status='{self.status.value}')>"
