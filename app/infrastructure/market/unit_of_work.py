"""
Adapter: SQLAlchemy unit of work.

Implements UnitOfWork port. One instance opens one connection and one
transaction; every repository it exposes shares that connection.
"""

import logging
from types import TracebackType
from typing import Callable, Optional

from sqlalchemy.engine import Connection, Engine, RootTransaction

from app.domain.market.ports import UnitOfWork
from app.infrastructure.market.like_repository import (
    NeighborLikeRepositoryAdapter,
    TradeLikeRepositoryAdapter,
)
from app.infrastructure.market.neighbor_post_repository import (
    NeighborPostRepositoryAdapter,
)
from app.infrastructure.market.trade_post_repository import TradePostRepositoryAdapter
from app.infrastructure.market.user_repository import UserRepositoryAdapter

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Transaction-scoped access to the market repositories."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._conn: Optional[Connection] = None
        self._tx: Optional[RootTransaction] = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self._conn = self._engine.connect()
        self._tx = self._conn.begin()
        self.users = UserRepositoryAdapter(self._conn)
        self.trade_posts = TradePostRepositoryAdapter(self._conn)
        self.trade_likes = TradeLikeRepositoryAdapter(self._conn)
        self.neighbor_posts = NeighborPostRepositoryAdapter(self._conn)
        self.neighbor_likes = NeighborLikeRepositoryAdapter(self._conn)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            self._conn.close()
            self._conn = None
            self._tx = None

    def commit(self) -> None:
        self._tx.commit()

    def rollback(self) -> None:
        if self._tx.is_active:
            self._tx.rollback()
            logger.debug("Unit of work rolled back")


def sqlalchemy_uow_factory(engine: Engine) -> Callable[[], UnitOfWork]:
    """Return a zero-argument factory producing fresh units of work."""
    return lambda: SqlAlchemyUnitOfWork(engine)
