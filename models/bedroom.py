# models/bedroom.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, enum_values
from .enums import BedroomStatus


class Bedroom(Base):
     """
     Bedroom model - a separately leasable room of a BEDROOM_WISE unit.

     Occupied if and only if exactly one Active lease references it.
     """
     __tablename__ = "bedrooms"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)

     bedroom_number = Column(String(50), nullable=False)  # display identifier, e.g. "101-2"
     room_number = Column(Integer, nullable=False)  # ordering within the unit
     status = Column(
          Enum(BedroomStatus, name="bedroom_status", values_callable=enum_values, create_constraint=True),
          default=BedroomStatus.VACANT,
          nullable=False
     )
     rent_amount = Column(Numeric(12, 2), default=0, nullable=False)

     # Relationships
     unit = relationship("Unit", back_populates="bedrooms")
     leases = relationship("Lease", back_populates="bedroom")

     def __repr__(self):
          return f"<Bedroom(id={self.id}, bedroom_number='{self.bedroom_number}', status='{self.status.value}')>"
