from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from django.contrib.auth.base_user import BaseUserManager


def _role_ids(raw) -> List[int]:
    ids: List[int] = []
    for entry in raw or []:
        role_id = entry.get("id") if isinstance(entry, Mapping) else entry
        if role_id is not None and int(role_id) not in ids:
            ids.append(int(role_id))
    return ids


@dataclass
class UserUpdateCommand:
    first_name: str
    last_name: str
    email: str
    role_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_validated(cls, data: Dict[str, Any]) -> "UserUpdateCommand":
        return cls(
            first_name=data.get("first_name", "").strip(),
            last_name=data.get("last_name", "").strip(),
            email=BaseUserManager.normalize_email(data["email"].strip()),
            role_ids=_role_ids(data.get("roles")),
        )


@dataclass
class UserInsertCommand(UserUpdateCommand):
    password: str = ""

    @classmethod
    def from_validated(cls, data: Dict[str, Any]) -> "UserInsertCommand":
        base = UserUpdateCommand.from_validated(data)
        return cls(
            first_name=base.first_name,
            last_name=base.last_name,
            email=base.email,
            role_ids=base.role_ids,
            password=data["password"],
        )
