"""StaffProfile ORM model — one row per portal account."""
import uuid
import enum
from sqlalchemy import Column, String, JSON, Enum as SAEnum
from portal.database import Base


class Role(str, enum.Enum):
    CUSTOMER_SERVICE = "CUSTOMER_SERVICE"
    SENIOR_CUSTOMER_SERVICE = "SENIOR_CUSTOMER_SERVICE"
    FINANCIAL_MANAGER = "FINANCIAL_MANAGER"
    ADMINISTRATION_MANAGER = "ADMINISTRATION_MANAGER"
    PRODUCTION_MANAGER = "PRODUCTION_MANAGER"
    SERVICE_MANAGER = "SERVICE_MANAGER"
    HR = "HR"


class Department(str, enum.Enum):
    CUSTOMER_SERVICE = "CUSTOMER_SERVICE"
    FINANCE = "FINANCE"
    ADMINISTRATION = "ADMINISTRATION"
    PRODUCTION = "PRODUCTION"
    SERVICE = "SERVICE"
    HR = "HR"


class MenuKey(str, enum.Enum):
    home = "home"
    event_flow = "event-flow"
    task_distribution = "task-distribution"
    client_management = "client-management"
    staff_management = "staff-management"
    recruitment = "recruitment"
    financial_management = "financial-management"


class StaffProfile(Base):
    __tablename__ = "staff_profiles"

    # Same identifier as the account in the external auth provider
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True)
    username = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    department = Column(SAEnum(Department), nullable=False)
    role = Column(SAEnum(Role), nullable=False)
    permissions = Column(JSON, nullable=False, default=list)  # list of MenuKey values
