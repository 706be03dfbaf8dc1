# schemas/tenant.py
"""
Pydantic schemas for tenant assignment (move) requests.
"""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator


class TenantAssignmentUpdate(BaseModel):
     """Move a tenant to a unit, or to one bedroom of a unit."""
     unit_id: Optional[int] = Field(None, gt=0)
     bedroom_id: Optional[int] = Field(None, gt=0)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_id": 4,
                    "bedroom_id": 11
               }
          }
     )

     @model_validator(mode="after")
     def check_target(self):
          if self.unit_id is None and self.bedroom_id is None:
               raise ValueError("unit_id or bedroom_id is required")
          return self
