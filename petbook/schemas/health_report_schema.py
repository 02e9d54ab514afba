from typing import Optional

from pydantic import BaseModel, Field


class HealthReportRequest(BaseModel):
    pet_id: Optional[str] = Field(default=None, alias="petId")
    format: str = "json"
