# schemas/lease.py
"""
Pydantic schemas for Lease API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models import LeaseStatus
from .invoice import InvoiceResponse


class LeaseCreate(BaseModel):
     """
     Schema for creating a lease.

     Omit start_date and monthly_rent to reserve the unit as a DRAFT; send
     both to create the lease Active straight away.
     """
     unit_id: int = Field(..., gt=0, description="Unit ID (must exist)")
     tenant_id: int = Field(..., gt=0, description="Tenant user ID (must exist)")
     bedroom_id: Optional[int] = Field(None, gt=0, description="Bedroom ID; omit to lease the whole unit")
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     monthly_rent: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     security_deposit: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_id": 3,
                    "tenant_id": 7,
                    "bedroom_id": None,
                    "start_date": "2026-11-01",
                    "end_date": "2027-10-31",
                    "monthly_rent": 15000.00,
                    "security_deposit": 30000.00
               }
          }
     )

     @model_validator(mode="after")
     def check_dates(self):
          if self.start_date and self.end_date and self.end_date < self.start_date:
               raise ValueError("end_date cannot be before start_date")
          return self


class LeaseRentUpdate(BaseModel):
     """Schema for correcting a lease's monthly rent."""
     monthly_rent: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "monthly_rent": 16500.00
               }
          }
     )


class LeaseResponse(BaseModel):
     """Schema for lease response."""
     id: int
     unit_id: int
     bedroom_id: Optional[int] = None
     tenant_id: int
     status: LeaseStatus
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     monthly_rent: Optional[Decimal] = None
     security_deposit: Optional[Decimal] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class LeaseDetailResponse(LeaseResponse):
     """Lease with the invoices billed against it."""
     invoices: List[InvoiceResponse] = []


class LeaseDeleteResponse(BaseModel):
     message: str
     lease_id: int
     unwound: bool


class LeaseHistoryItem(BaseModel):
     """One row of the lease history table."""
     id: int
     unit: str
     type: str
     scope: str
     tenant: str
     term: str
     status: str
     start_date: date
     end_date: date
     monthly_rent: Decimal


class CurrentLeaseResponse(BaseModel):
     """The Active (or reserved DRAFT) lease holding a unit."""
     lease_id: int
     status: str
     tenant_id: int
     tenant_name: str
     bedroom_id: Optional[int] = None


class UnitWithTenant(BaseModel):
     id: int
     unit_number: str
     tenant_id: int
     tenant_name: str
