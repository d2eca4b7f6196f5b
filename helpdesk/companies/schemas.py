# helpdesk/companies/schemas.py
from pydantic import BaseModel


class CompanyOut(BaseModel):
    id: int
    name: str
    description: str | None = None

    model_config = {"from_attributes": True}
