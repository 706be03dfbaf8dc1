# routers/units.py
"""
Unit and bedroom inventory routes.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from services.exceptions import LeaseError
from services.inventory_service import InventoryService
from services.occupancy_service import change_rental_mode
from schemas.unit import (
     UnitDetailResponse,
     VacantBedroomResponse,
     RentalModeUpdate,
     UnitRentalModeResponse,
     InventoryDeleteResponse,
)
from .errors import reject

router = APIRouter(prefix="/api/admin/units", tags=["units"])


@router.get(
     "/bedrooms/vacant",
     response_model=List[VacantBedroomResponse],
     summary="List vacant bedrooms"
)
def list_vacant_bedrooms(
     property_id: Optional[int] = Query(None, description="Filter by property ID"),
     unit_id: Optional[int] = Query(None, description="Filter by unit ID"),
     db: Session = Depends(get_session),
):
     return InventoryService.list_vacant_bedrooms(db, property_id=property_id, unit_id=unit_id)


@router.get(
     "/{unit_id}",
     response_model=UnitDetailResponse,
     summary="Unit details with bedrooms and leases"
)
def get_unit(unit_id: int, db: Session = Depends(get_session)):
     try:
          return InventoryService.get_unit_details(db, unit_id)
     except LeaseError as exc:
          raise reject(db, exc)


@router.put(
     "/{unit_id}/rental-mode",
     response_model=UnitRentalModeResponse,
     summary="Switch a unit between full-unit and bedroom-wise renting"
)
def update_rental_mode(
     unit_id: int,
     body: RentalModeUpdate,
     db: Session = Depends(get_session),
):
     try:
          unit = change_rental_mode(db, unit_id, body.rental_mode)
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     return {
          "id": unit.id,
          "unit_number": unit.unit_number,
          "rental_mode": unit.rental_mode,
          "status": unit.status.value,
     }


@router.delete(
     "/{unit_id}",
     response_model=InventoryDeleteResponse,
     summary="Delete a unit"
)
def delete_unit(unit_id: int, db: Session = Depends(get_session)):
     """Delete a unit with its bedrooms, leases and invoices. Refused while a lease is Active."""
     try:
          result = InventoryService.delete_unit(db, unit_id)
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     return result
