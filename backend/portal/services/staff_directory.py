"""Staff directory rules shared by the staff routes."""
from typing import Iterable, Optional

from portal.errors import ValidationError
from portal.models.staff import Department, MenuKey, Role

HR_ONLY_MESSAGE = "Only HR users can manage staff accounts."


def normalize_permissions(raw: Optional[Iterable[MenuKey]]) -> list[str]:
    """Every account can see the home menu; duplicates are dropped, order kept."""
    permissions = [MenuKey.home.value]
    for permission in raw or []:
        value = MenuKey(permission).value
        if value not in permissions:
            permissions.append(value)
    return permissions


def validate_profile(
    email: str, username: str, department: Optional[Department], role: Optional[Role]
) -> None:
    if not email.strip() or not username.strip() or department is None or role is None:
        raise ValidationError("Email, username, department, and role are required.")
