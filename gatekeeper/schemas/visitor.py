# gatekeeper/schemas/visitor.py
from pydantic import BaseModel


class VisitorIn(BaseModel):
    # Missing fields fall back to "" so the registry can answer 400, not 422
    name: str = ""
    plate: str = ""


class VisitorOut(BaseModel):
    name: str
    plate: str

    class Config:
        from_attributes = True
