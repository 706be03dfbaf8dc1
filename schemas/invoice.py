# schemas/invoice.py
"""
Pydantic schemas for invoices issued by the lease lifecycle.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import InvoiceStatus


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: int
     invoice_no: str
     tenant_id: int
     unit_id: int
     lease_id: Optional[int] = None
     month: str
     rent: Decimal
     service_fees: Decimal
     amount: Decimal
     paid_amount: Decimal
     balance_due: Decimal
     status: InvoiceStatus
     due_date: date
     created_at: Optional[datetime] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "invoice_no": "INV-LEASE-00001",
                    "tenant_id": 7,
                    "unit_id": 3,
                    "lease_id": 12,
                    "month": "October 2026",
                    "rent": 15000.00,
                    "service_fees": 0.00,
                    "amount": 15000.00,
                    "paid_amount": 0.00,
                    "balance_due": 15000.00,
                    "status": "sent",
                    "due_date": "2026-10-17",
                    "created_at": "2026-10-17T09:30:00"
               }
          }
     )


class MonthlyInvoiceRunRequest(BaseModel):
     """Body for the scheduler-triggered monthly invoice run."""
     run_date: Optional[date] = Field(None, description="Billing date; defaults to today")


class MonthlyInvoiceRunResponse(BaseModel):
     """Result of one monthly invoice run."""
     month: str
     created: int
     invoices: List[InvoiceResponse]
