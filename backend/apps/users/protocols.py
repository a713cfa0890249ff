from __future__ import annotations

from typing import TYPE_CHECKING, ContextManager, Iterable, List, Optional, Protocol

if TYPE_CHECKING:
    from apps.common.pagination import Page, PageRequest
    from apps.users.models import Role, User


class UserRepositoryProtocol(Protocol):
    def atomic(self) -> ContextManager: ...

    def find_all(self, page_request: "PageRequest") -> "Page[User]": ...

    def find_by_id(self, pk: int) -> Optional["User"]: ...

    def find_by_email(self, email: str) -> Optional["User"]: ...

    def create_user(self, *, email: str, password: str, **data) -> "User": ...

    def update(self, user: "User", **data) -> "User": ...

    def set_roles(self, user: "User", roles: Iterable["Role"]) -> None: ...

    def delete_by_id(self, pk: int) -> None: ...


class RoleRepositoryProtocol(Protocol):
    def find_all_by_ids(self, ids: Iterable[int]) -> List["Role"]: ...
