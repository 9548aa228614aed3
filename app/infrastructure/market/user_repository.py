"""
Adapter: User repository.

Implements UserRepository port on top of a SQLAlchemy connection
owned by the current unit of work.
"""

import logging
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, Row
from sqlalchemy.exc import IntegrityError

from app.domain.market.entities import Coordinate, User
from app.domain.market.errors import ConflictError
from app.domain.market.ports import UserRepository
from app.infrastructure.market.schema import users

logger = logging.getLogger(__name__)


def row_to_user(row: Row, prefix: str = "") -> User:
    """Map a ``users`` row to a User.

    Args:
        row: Result row holding every ``users`` column.
        prefix: Label prefix used when the columns were selected through
            a join (``"seller__"``, ``"buyer__"``).
    """
    m = row._mapping
    return User(
        id=m[f"{prefix}id"],
        username=m[f"{prefix}username"],
        email=m[f"{prefix}email"],
        password_hash=m[f"{prefix}password_hash"],
        location=m[f"{prefix}location"],
        coordinate=Coordinate(m[f"{prefix}latitude"], m[f"{prefix}longitude"]),
        temperature=m[f"{prefix}temperature"],
        search_radius_km=m[f"{prefix}search_radius_km"],
        img_url=m[f"{prefix}img_url"],
        created_at=m[f"{prefix}created_at"],
        modified_at=m[f"{prefix}modified_at"],
    )


class UserRepositoryAdapter(UserRepository):
    """Stores users in the ``users`` table."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def _get_one(self, *criteria) -> Optional[User]:
        row = self._conn.execute(select(users).where(*criteria)).first()
        return row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one(users.c.id == user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one(users.c.username == username)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one(users.c.email == email)

    def add(self, user: User) -> User:
        """Insert a user and assign its generated id.

        Raises:
            ConflictError: If username or email already exists.
        """
        try:
            with self._conn.begin_nested():
                result = self._conn.execute(insert(users).values(**self._values(user)))
        except IntegrityError as exc:
            raise ConflictError("Username or email is already in use") from exc
        user.id = result.inserted_primary_key[0]
        logger.debug("Inserted user id=%d", user.id)
        return user

    def update(self, user: User) -> None:
        try:
            with self._conn.begin_nested():
                self._conn.execute(
                    update(users).where(users.c.id == user.id).values(**self._values(user))
                )
        except IntegrityError as exc:
            raise ConflictError("Username is already in use") from exc

    def find_top_by_temperature(self, limit: int) -> list[User]:
        rows = self._conn.execute(
            select(users)
            .order_by(users.c.temperature.desc(), users.c.id.asc())
            .limit(limit)
        ).fetchall()
        return [row_to_user(row) for row in rows]

    @staticmethod
    def _values(user: User) -> dict:
        return {
            "username": user.username,
            "email": user.email,
            "password_hash": user.password_hash,
            "location": user.location,
            "latitude": user.coordinate.latitude,
            "longitude": user.coordinate.longitude,
            "temperature": user.temperature,
            "search_radius_km": user.search_radius_km,
            "img_url": user.img_url,
            "created_at": user.created_at,
            "modified_at": user.modified_at,
        }
