from dataclasses import dataclass, field
from typing import List

from .models import Role, User


@dataclass
class RoleDTO:
    id: int
    authority: str


@dataclass
class UserDTO:
    id: int
    first_name: str
    last_name: str
    email: str
    roles: List[RoleDTO] = field(default_factory=list)


def role_to_dto(role: Role) -> RoleDTO:
    return RoleDTO(id=role.id, authority=role.authority)


def user_to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        roles=[role_to_dto(r) for r in user.roles.all()],
    )
