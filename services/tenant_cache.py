# services/tenant_cache.py
"""
Tenant occupancy cache.

users.building_id / unit_id / bedroom_id answer "where does this tenant live"
without a join. They are a materialized view of the leases table: the scope of
the tenant's Active lease, or of their most recent DRAFT reservation when no
lease is Active, or empty. Every service that writes a lease calls
refresh_tenant_cache() before its transaction ends.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from models import Lease, LeaseStatus, Unit, User, UserRole
from .exceptions import NotFoundError

logger = logging.getLogger(__name__)


def get_tenant(db: Session, tenant_id: int) -> User:
     """Load a tenant user or raise NotFoundError."""
     tenant = (
          db.query(User)
          .filter(User.id == tenant_id, User.role == UserRole.TENANT)
          .first()
     )
     if tenant is None:
          raise NotFoundError("Tenant", tenant_id)
     return tenant


def current_lease_for_tenant(db: Session, tenant_id: int) -> Optional[Lease]:
     """The tenant's Active lease, else their most recent DRAFT, else None."""
     active = (
          db.query(Lease)
          .filter(Lease.tenant_id == tenant_id, Lease.status == LeaseStatus.ACTIVE)
          .order_by(Lease.id.desc())
          .first()
     )
     if active is not None:
          return active
     return (
          db.query(Lease)
          .filter(Lease.tenant_id == tenant_id, Lease.status == LeaseStatus.DRAFT)
          .order_by(Lease.id.desc())
          .first()
     )


def refresh_tenant_cache(db: Session, tenant: User) -> Optional[Lease]:
     """
     Recompute the tenant's cached unit/bedroom/building from their leases.

     Pending ORM changes are flushed first so the lookup sees the lease rows
     written earlier in the same transaction.

     Returns:
          The lease the cache now mirrors, or None when it was cleared.
     """
     db.flush()
     lease = current_lease_for_tenant(db, tenant.id)

     if lease is None:
          tenant.unit_id = None
          tenant.bedroom_id = None
          tenant.building_id = None
     else:
          unit = db.query(Unit).filter(Unit.id == lease.unit_id).first()
          tenant.unit_id = lease.unit_id
          tenant.bedroom_id = lease.bedroom_id
          tenant.building_id = unit.property_id if unit else None

     db.flush()
     logger.debug(
          "Tenant %s cache -> unit=%s bedroom=%s building=%s",
          tenant.id, tenant.unit_id, tenant.bedroom_id, tenant.building_id
     )
     return lease


def refresh_tenant_caches(db: Session, tenant_ids) -> None:
     """Refresh several tenants at once (used by inventory deletions)."""
     for tenant_id in sorted(set(tenant_ids)):
          tenant = db.query(User).filter(User.id == tenant_id).first()
          if tenant is not None:
               refresh_tenant_cache(db, tenant)
