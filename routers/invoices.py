# routers/invoices.py
"""
Invoice API routes.

Invoices are issued by the lease lifecycle and by the monthly run; these
routes only read them and let the external scheduler trigger the run.
"""
from datetime import date
from typing import Optional, List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from models import Invoice, InvoiceStatus
from services.invoice_service import InvoiceService, month_label
from schemas.invoice import (
     InvoiceResponse,
     MonthlyInvoiceRunRequest,
     MonthlyInvoiceRunResponse,
)

router = APIRouter(prefix="/api/admin/invoices", tags=["invoices"])


@router.get(
     "",
     response_model=List[InvoiceResponse],
     summary="List invoices with filters"
)
def list_invoices(
     tenant_id: Optional[int] = Query(None, description="Filter by tenant ID"),
     lease_id: Optional[int] = Query(None, description="Filter by lease ID"),
     unit_id: Optional[int] = Query(None, description="Filter by unit ID"),
     status: Optional[InvoiceStatus] = Query(None, description="Filter by status"),
     db: Session = Depends(get_session),
):
     query = db.query(Invoice)

     if tenant_id:
          query = query.filter(Invoice.tenant_id == tenant_id)
     if lease_id:
          query = query.filter(Invoice.lease_id == lease_id)
     if unit_id:
          query = query.filter(Invoice.unit_id == unit_id)
     if status:
          query = query.filter(Invoice.status == status)

     return query.order_by(Invoice.due_date.desc(), Invoice.id.desc()).all()


@router.post(
     "/generate-monthly",
     response_model=MonthlyInvoiceRunResponse,
     summary="Run the monthly invoice batch"
)
def generate_monthly_invoices(
     body: Optional[MonthlyInvoiceRunRequest] = None,
     db: Session = Depends(get_session),
):
     """
     Issue this month's invoice for every Active lease that lacks one.

     Safe to call more than once per month.
     """
     run_date = (body.run_date if body else None) or date.today()
     invoices = InvoiceService.generate_monthly_invoices(db, today=run_date)
     db.commit()
     return {"month": month_label(run_date), "created": len(invoices), "invoices": invoices}
