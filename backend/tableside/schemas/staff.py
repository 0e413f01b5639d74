"""Staff, role and permission schemas."""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from tableside.schemas.common import Money, NonNegativeMoney

StaffStatus = Literal["active", "inactive"]


class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    role: str = Field(..., min_length=1, max_length=100)
    status: StaffStatus = "active"
    join_date: date
    salary: NonNegativeMoney = Decimal("0")
    department: str = Field(..., min_length=1, max_length=100)
    shift: Optional[str] = Field(None, max_length=50)
    image_url: Optional[str] = Field(None, max_length=500)


class StaffUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    role: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[StaffStatus] = None
    join_date: Optional[date] = None
    salary: Optional[NonNegativeMoney] = None
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    shift: Optional[str] = Field(None, max_length=50)
    image_url: Optional[str] = Field(None, max_length=500)


class StaffResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    status: str
    join_date: date
    salary: Money
    department: str
    shift: Optional[str] = None
    image_url: Optional[str] = None

    model_config = {"from_attributes": True}


class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)


class PermissionResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str

    model_config = {"from_attributes": True}


class GroupedPermissionsResponse(BaseModel):
    categories: Dict[str, List[PermissionResponse]]


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    permissions: List[int] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    expected_version: Optional[int] = None


class PermissionToggle(BaseModel):
    expected_version: Optional[int] = Field(
        None, description="Version the client last saw; a stale value is rejected with 409"
    )


class RoleResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    permissions: List[int]
    version: int

    model_config = {"from_attributes": True}
