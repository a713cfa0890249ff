from __future__ import annotations

from typing import List, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from rest_framework.exceptions import ValidationError

from apps.api.exceptions import DatabaseError, ResourceNotFoundError
from apps.common import get_logger
from apps.common.pagination import Page, PageRequest
from .commands import UserInsertCommand, UserUpdateCommand
from .dtos import UserDTO, user_to_dto
from .models import Role
from .protocols import RoleRepositoryProtocol, UserRepositoryProtocol

logger = get_logger(__name__).bind(component="users", layer="service")


class UserService:
    def __init__(self, users: UserRepositoryProtocol, roles: RoleRepositoryProtocol):
        self.users = users
        self.roles = roles
        self.logger = logger.bind(service="UserService")

    def find_all(self, page_request: PageRequest) -> Page[UserDTO]:
        self.logger.debug("Listing users", page=page_request.page, size=page_request.size)
        with self.users.atomic():
            return self.users.find_all(page_request).map(user_to_dto)

    def find_by_id(self, user_id: int) -> UserDTO:
        with self.users.atomic():
            user = self.users.find_by_id(user_id)
            if user is None:
                self.logger.info("User not found", user_id=user_id)
                raise ResourceNotFoundError(
                    "Entity not found", details={"id": str(user_id)}
                )
            return user_to_dto(user)

    def insert(self, cmd: UserInsertCommand) -> UserDTO:
        self.logger.info("Creating user", email=cmd.email)
        with self.users.atomic():
            self._ensure_email_free(cmd.email)
            roles = self._resolve_roles(cmd.role_ids)
            try:
                user = self.users.create_user(
                    email=cmd.email,
                    password=cmd.password,
                    first_name=cmd.first_name,
                    last_name=cmd.last_name,
                )
            except IntegrityError as exc:
                self.logger.warning("User creation violated a constraint", error=str(exc))
                raise DatabaseError("Integrity violation") from exc
            self.users.set_roles(user, roles)
        self.logger.info("User created", user_id=user.id)
        return user_to_dto(user)

    def update(self, user_id: int, cmd: UserUpdateCommand) -> UserDTO:
        self.logger.info("Updating user", user_id=user_id)
        with self.users.atomic():
            user = self.users.find_by_id(user_id)
            if user is None:
                self.logger.warning("User update failed: not found", user_id=user_id)
                raise ResourceNotFoundError(
                    f"ID not found: {user_id}", details={"id": str(user_id)}
                )
            self._ensure_email_free(cmd.email, exclude_id=user_id)
            roles = self._resolve_roles(cmd.role_ids)
            try:
                self.users.update(
                    user,
                    first_name=cmd.first_name,
                    last_name=cmd.last_name,
                    email=cmd.email,
                )
            except IntegrityError as exc:
                self.logger.warning(
                    "User update violated a constraint", user_id=user_id, error=str(exc)
                )
                raise DatabaseError("Integrity violation") from exc
            self.users.set_roles(user, roles)
        self.logger.info("User updated", user_id=user_id)
        return user_to_dto(user)

    def delete(self, user_id: int) -> None:
        self.logger.info("Deleting user", user_id=user_id)
        try:
            with self.users.atomic():
                self.users.delete_by_id(user_id)
        except ObjectDoesNotExist as exc:
            self.logger.warning("User deletion failed: not found", user_id=user_id)
            raise ResourceNotFoundError(
                f"ID not found: {user_id}", details={"id": str(user_id)}
            ) from exc
        except IntegrityError as exc:
            self.logger.warning(
                "User deletion violated a constraint", user_id=user_id, error=str(exc)
            )
            raise DatabaseError("Integrity violation") from exc
        self.logger.info("User deleted", user_id=user_id)

    def _ensure_email_free(self, email: str, exclude_id: Optional[int] = None) -> None:
        existing = self.users.find_by_email(email)
        if existing is not None and existing.id != exclude_id:
            self.logger.info("Rejecting duplicate email", email=email)
            raise ValidationError({"email": ["Email already exists"]})

    def _resolve_roles(self, role_ids: List[int]) -> List[Role]:
        roles = self.roles.find_all_by_ids(role_ids)
        missing = sorted(set(role_ids) - {r.id for r in roles})
        if missing:
            self.logger.info("Unknown roles referenced", role_ids=missing)
            raise ResourceNotFoundError(
                "Role not found", details={"roleIds": missing}
            )
        return roles
