# routers/notifications.py
from fastapi import BackgroundTasks

from models import Lease, LeaseStatus
from utils.email import notify_lease_activated


def schedule_confirmation(background_tasks: BackgroundTasks, lease: Lease) -> None:
     """Queue the confirmation email with plain values; the session is closed by then."""
     if lease.status != LeaseStatus.ACTIVE:
          return
     unit_label = f"Unit {lease.unit.unit_number}"
     if lease.bedroom is not None:
          unit_label = f"Bedroom {lease.bedroom.bedroom_number}, {unit_label}"
     background_tasks.add_task(
          notify_lease_activated,
          lease.id,
          lease.tenant.email,
          lease.tenant.name,
          unit_label,
          lease.start_date,
          lease.monthly_rent,
     )
