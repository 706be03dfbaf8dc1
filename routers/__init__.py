# routers/__init__.py
from .invoices import router as invoices_router
from .leases import router as leases_router
from .properties import router as properties_router
from .tenants import router as tenants_router
from .units import router as units_router

__all__ = [
     "invoices_router",
     "leases_router",
     "properties_router",
     "tenants_router",
     "units_router",
]
