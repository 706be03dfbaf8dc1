# routers/properties.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from services.exceptions import LeaseError
from services.inventory_service import InventoryService
from schemas.unit import InventoryDeleteResponse
from .errors import reject

router = APIRouter(prefix="/api/admin/properties", tags=["properties"])


@router.delete(
     "/{property_id}",
     response_model=InventoryDeleteResponse,
     summary="Delete a property and everything under it"
)
def delete_property(property_id: int, db: Session = Depends(get_session)):
     try:
          result = InventoryService.delete_property(db, property_id)
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     return result
