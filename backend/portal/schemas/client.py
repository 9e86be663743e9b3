"""Pydantic schemas for Clients."""
from typing import Optional
from pydantic import BaseModel


class ClientCreate(BaseModel):
    name: str = ""
    address: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None


class ClientOut(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    discount_flag: Optional[bool] = None

    model_config = {"from_attributes": True}
