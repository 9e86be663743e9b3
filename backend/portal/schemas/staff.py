"""Pydantic schemas for the staff directory."""
from typing import Optional
from pydantic import BaseModel

from portal.models.staff import Department, MenuKey, Role


class StaffCreate(BaseModel):
    id: Optional[str] = None  # identity issued by the auth provider
    email: str = ""
    username: str = ""
    phone: Optional[str] = None
    department: Optional[Department] = None
    role: Optional[Role] = None
    permissions: list[MenuKey] = []


class StaffUpdate(BaseModel):
    email: str = ""
    username: str = ""
    phone: Optional[str] = None
    department: Optional[Department] = None
    role: Optional[Role] = None
    permissions: list[MenuKey] = []


class StaffOut(BaseModel):
    id: str
    email: str
    username: str
    phone: Optional[str] = None
    department: Department
    role: Role
    permissions: list[MenuKey] = []

    model_config = {"from_attributes": True}
