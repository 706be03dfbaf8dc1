# schemas/unit.py
"""
Pydantic schemas for unit and bedroom inventory endpoints.
"""
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from models import RentalMode
from .lease import LeaseResponse


class BedroomResponse(BaseModel):
     id: int
     bedroom_number: str
     room_number: int
     status: str
     rent_amount: Decimal
     tenant_id: Optional[int] = None
     tenant_name: Optional[str] = None


class UnitDetailResponse(BaseModel):
     """Unit with bedrooms, who holds them, and its lease history."""
     id: int
     property_id: int
     property_name: str
     unit_number: str
     unit_type: Optional[str] = None
     floor: Optional[int] = None
     rental_mode: str
     status: str
     bedroom_count: int
     rent_amount: Decimal
     bedrooms: List[BedroomResponse]
     active_leases: List[LeaseResponse]
     lease_history: List[LeaseResponse]


class VacantBedroomResponse(BaseModel):
     id: int
     unit_id: int
     property_id: int
     bedroom_number: str
     unit_number: str
     display_name: str
     rent_amount: Decimal


class RentalModeUpdate(BaseModel):
     rental_mode: RentalMode

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "rental_mode": "BEDROOM_WISE"
               }
          }
     )


class UnitRentalModeResponse(BaseModel):
     id: int
     unit_number: str
     rental_mode: RentalMode
     status: str


class InventoryDeleteResponse(BaseModel):
     message: str
     unit_id: Optional[int] = None
     property_id: Optional[int] = None
     units: Optional[int] = None
     bedrooms: int
     leases: int
     invoices: int
