# routers/tenants.py
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from database import get_session
from services.exceptions import LeaseError
from services.reassignment_service import update_tenant_assignment
from services.tenant_cache import current_lease_for_tenant
from schemas.lease import LeaseResponse
from schemas.tenant import TenantAssignmentUpdate
from .errors import reject
from .notifications import schedule_confirmation

router = APIRouter(prefix="/api/admin/tenants", tags=["tenants"])


@router.put(
     "/{tenant_id}/assignment",
     response_model=LeaseResponse,
     summary="Move a tenant to another unit or bedroom"
)
def update_assignment(
     tenant_id: int,
     body: TenantAssignmentUpdate,
     background_tasks: BackgroundTasks,
     db: Session = Depends(get_session),
):
     """
     Reassign a tenant.

     An Active lease is closed as MOVED and a new Active lease starts today at
     the target; a DRAFT reservation is simply repointed. The tenant is emailed
     when the move opens an Active lease.
     """
     previous = current_lease_for_tenant(db, tenant_id)
     previous_id = previous.id if previous is not None else None
     try:
          lease = update_tenant_assignment(
               db,
               tenant_id,
               new_unit_id=body.unit_id,
               new_bedroom_id=body.bedroom_id,
          )
     except LeaseError as exc:
          raise reject(db, exc)

     db.commit()
     if lease.id != previous_id:
          schedule_confirmation(background_tasks, lease)
     return lease
