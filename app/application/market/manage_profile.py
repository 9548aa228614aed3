"""
Use cases: Member accounts and profile edits.

    RegisterUserUseCase      : create an account (unique username and email)
    GetProfileUseCase        : read a profile
    EditUsernameUseCase      : rename, rejecting names held by someone else
    EditLocationUseCase      : move the browsing coordinate and its label
    EditSearchRadiusUseCase  : change the discovery radius
    EditPasswordUseCase      : change the password after verifying the old one

Output: UserResult (EditPasswordUseCase returns None).
Failure cases: UserNotFoundError, ConflictError, ForbiddenError,
DomainValidationError.
"""

import logging

from app.application.market.dtos import (
    EditLocationCommand,
    EditPasswordCommand,
    EditSearchRadiusCommand,
    EditUsernameCommand,
    RegisterUserCommand,
    UserResult,
)
from app.application.market.lookups import require_user
from app.application.market.mappers import to_user_result
from app.domain.market.entities import (
    DEFAULT_SEARCH_RADIUS_KM,
    DEFAULT_TEMPERATURE,
    Coordinate,
    User,
    utcnow,
)
from app.domain.market.errors import (
    ConflictError,
    DomainValidationError,
    ForbiddenError,
)
from app.domain.market.ports import PasswordHasher, UnitOfWorkFactory

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEARCH_RADIUS_KM = 50.0


def _require_text(value: str, field_name: str) -> str:
    value = value.strip()
    if not value:
        raise DomainValidationError(f"{field_name} must not be blank")
    return value


class RegisterUserUseCase:
    """Creates a member with the default temperature and search radius."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        hasher: PasswordHasher,
        default_temperature: float = DEFAULT_TEMPERATURE,
        default_search_radius_km: float = DEFAULT_SEARCH_RADIUS_KM,
    ) -> None:
        self._uow_factory = uow_factory
        self._hasher = hasher
        self._default_temperature = default_temperature
        self._default_search_radius_km = default_search_radius_km

    def execute(self, command: RegisterUserCommand) -> UserResult:
        username = _require_text(command.username, "Username")
        email = _require_text(command.email, "Email").lower()
        if not command.password:
            raise DomainValidationError("Password must not be blank")
        coordinate = Coordinate(command.latitude, command.longitude)

        with self._uow_factory() as uow:
            if uow.users.get_by_username(username) is not None:
                raise ConflictError(f"Username already taken: {username}")
            if uow.users.get_by_email(email) is not None:
                raise ConflictError(f"Email already registered: {email}")

            user = uow.users.add(
                User(
                    username=username,
                    email=email,
                    password_hash=self._hasher.hash(command.password),
                    location=command.location,
                    coordinate=coordinate,
                    temperature=self._default_temperature,
                    search_radius_km=self._default_search_radius_km,
                )
            )

        logger.info("User registered: id=%d", user.id)
        return to_user_result(user)


class GetProfileUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, user_id: int) -> UserResult:
        with self._uow_factory() as uow:
            user = require_user(uow, user_id)
        return to_user_result(user)


class EditUsernameUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: EditUsernameCommand) -> UserResult:
        username = _require_text(command.username, "Username")

        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            if user.username == username:
                return to_user_result(user)

            holder = uow.users.get_by_username(username)
            if holder is not None and holder.id != user.id:
                raise ConflictError(f"Username already taken: {username}")

            user.username = username
            user.modified_at = utcnow()
            uow.users.update(user)

        logger.info("Username changed: id=%d", user.id)
        return to_user_result(user)


class EditLocationUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def execute(self, command: EditLocationCommand) -> UserResult:
        coordinate = Coordinate(command.latitude, command.longitude)

        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            user.location = command.location
            user.coordinate = coordinate
            user.modified_at = utcnow()
            uow.users.update(user)

        logger.info("Location changed: id=%d", user.id)
        return to_user_result(user)


class EditSearchRadiusUseCase:
    """Accepts radii in the half-open range (0, max_search_radius_km]."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        max_search_radius_km: float = DEFAULT_MAX_SEARCH_RADIUS_KM,
    ) -> None:
        self._uow_factory = uow_factory
        self._max_search_radius_km = max_search_radius_km

    def execute(self, command: EditSearchRadiusCommand) -> UserResult:
        if not 0 < command.radius_km <= self._max_search_radius_km:
            raise DomainValidationError(
                f"Search radius must be in (0, {self._max_search_radius_km}] km: "
                f"{command.radius_km}"
            )

        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            user.search_radius_km = command.radius_km
            user.modified_at = utcnow()
            uow.users.update(user)

        logger.info("Search radius changed: id=%d, radius_km=%.2f", user.id, command.radius_km)
        return to_user_result(user)


class EditPasswordUseCase:
    def __init__(self, uow_factory: UnitOfWorkFactory, hasher: PasswordHasher) -> None:
        self._uow_factory = uow_factory
        self._hasher = hasher

    def execute(self, command: EditPasswordCommand) -> None:
        if not command.new_password:
            raise DomainValidationError("Password must not be blank")
        if command.new_password != command.confirm_password:
            raise DomainValidationError("New password and confirmation do not match")

        with self._uow_factory() as uow:
            user = require_user(uow, command.user_id)
            if not self._hasher.verify(command.current_password, user.password_hash):
                raise ForbiddenError("Current password is incorrect")
            user.password_hash = self._hasher.hash(command.new_password)
            user.modified_at = utcnow()
            uow.users.update(user)

        logger.info("Password changed: id=%d", user.id)
