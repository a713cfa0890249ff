from typing import Iterable, Optional

from apps.common.repository import GenericRepository
from .models import Role, User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def queryset(self):
        return self.model.objects.prefetch_related("roles")

    def find_by_email(self, email: str) -> Optional[User]:
        return self.queryset().filter(email__iexact=email).first()

    def create_user(self, *, email: str, password: str, **data) -> User:
        return self.model.objects.create_user(email=email, password=password, **data)

    def set_roles(self, user: User, roles: Iterable[Role]) -> None:
        user.roles.clear()
        user.roles.add(*roles)


class RoleRepository(GenericRepository[Role]):
    def __init__(self):
        super().__init__(Role)
