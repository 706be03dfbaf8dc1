# routers/leases.py
"""
Lease API routes.

Thin adapter over services.lease_service: parse the body, run one lease
operation, commit, and only then schedule the tenant's confirmation email.
"""
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import RentalMode
from services.exceptions import LeaseError
from services.lease_service import LeaseService
from schemas.lease import (
     LeaseCreate,
     LeaseRentUpdate,
     LeaseResponse,
     LeaseDetailResponse,
     LeaseDeleteResponse,
     LeaseHistoryItem,
     CurrentLeaseResponse,
     UnitWithTenant,
)
from .notifications import schedule_confirmation
from .errors import reject

router = APIRouter(prefix="/api/admin/leases", tags=["leases"])


@router.post(
     "",
     response_model=LeaseResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a lease or DRAFT reservation"
)
def create_lease(
     lease_data: LeaseCreate,
     background_tasks: BackgroundTasks,
     db: Session = Depends(get_session),
):
     """
     Create a lease for a tenant on a unit or one of its bedrooms.

     - With **start_date** and **monthly_rent**: the lease is Active immediately
     - Without them: the unit/bedroom is reserved as a DRAFT
     """
     try:
          lease = LeaseService.create_lease(
               db,
               unit_id=lease_data.unit_id,
               tenant_id=lease_data.tenant_id,
               bedroom_id=lease_data.bedroom_id,
               start_date=lease_data.start_date,
               end_date=lease_data.end_date,
               monthly_rent=lease_data.monthly_rent,
               security_deposit=lease_data.security_deposit,
          )
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     schedule_confirmation(background_tasks, lease)
     return lease


@router.get(
     "",
     response_model=List[LeaseHistoryItem],
     summary="Lease history"
)
def get_lease_history(db: Session = Depends(get_session)):
     """Leases with a start and end date, newest first."""
     return LeaseService.get_lease_history(db)


@router.get(
     "/active/{unit_id}",
     response_model=Optional[CurrentLeaseResponse],
     summary="Current tenant of a unit"
)
def get_current_lease_for_unit(unit_id: int, db: Session = Depends(get_session)):
     return LeaseService.get_current_lease_for_unit(db, unit_id)


@router.get(
     "/units-with-tenants",
     response_model=List[UnitWithTenant],
     summary="Units of a property that have a tenant"
)
def get_units_with_tenants(
     property_id: int = Query(..., gt=0, description="Property ID"),
     rental_mode: RentalMode = Query(RentalMode.FULL_UNIT, description="Rental mode of the units"),
     db: Session = Depends(get_session),
):
     return LeaseService.get_units_with_tenants(db, property_id, rental_mode)


@router.get(
     "/{lease_id}",
     response_model=LeaseDetailResponse,
     summary="Get lease by ID"
)
def get_lease(lease_id: int, db: Session = Depends(get_session)):
     try:
          return LeaseService.get_lease(db, lease_id)
     except LeaseError as exc:
          raise reject(db, exc)


@router.post(
     "/{lease_id}/activate",
     response_model=LeaseResponse,
     summary="Activate a DRAFT lease"
)
def activate_lease(
     lease_id: int,
     background_tasks: BackgroundTasks,
     db: Session = Depends(get_session),
):
     """Turn a DRAFT reservation into an Active lease starting today."""
     try:
          lease = LeaseService.activate_lease(db, lease_id)
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     schedule_confirmation(background_tasks, lease)
     return lease


@router.put(
     "/{lease_id}",
     response_model=LeaseResponse,
     summary="Update lease rent"
)
def update_lease(
     lease_id: int,
     update_data: LeaseRentUpdate,
     db: Session = Depends(get_session),
):
     """Set the monthly rent and back-fill unpaid zero-amount invoices."""
     try:
          lease = LeaseService.update_lease_rent(db, lease_id, update_data.monthly_rent)
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     return lease


@router.delete(
     "/{lease_id}",
     response_model=LeaseDeleteResponse,
     summary="Delete a lease"
)
def delete_lease(lease_id: int, db: Session = Depends(get_session)):
     """Delete a lease; an Active one releases its unit/bedroom first."""
     try:
          result = LeaseService.delete_lease(db, lease_id)
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     return result
