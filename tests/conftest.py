"""
Shared fixtures for the market test suite.

Every test gets a fresh in-memory SQLite database with the full schema,
so repositories and use cases run against real SQL.
"""

import pytest
from fastapi.testclient import TestClient

from app.application.market.create_trade_post import CreateTradePostUseCase
from app.application.market.dtos import CreateTradePostCommand, TradePostResult
from app.domain.market.entities import Coordinate, User
from app.infrastructure.market.database import build_engine
from app.infrastructure.market.schema import create_schema
from app.infrastructure.market.unit_of_work import sqlalchemy_uow_factory

# Seoul City Hall and points at known distances from it.
CITY_HALL = Coordinate(37.5663, 126.9779)
NEAR_CITY_HALL = Coordinate(37.5700, 126.9800)  # ~0.45 km
GANGNAM = Coordinate(37.4979, 127.0276)  # ~8.8 km
BUSAN = Coordinate(35.1796, 129.0756)  # ~325 km


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def uow_factory(engine):
    return sqlalchemy_uow_factory(engine)


@pytest.fixture
def make_user(uow_factory):
    """Insert a user directly and return it with its id."""
    counter = {"n": 0}

    def _make(
        username: str | None = None,
        coordinate: Coordinate = CITY_HALL,
        temperature: float = 36.5,
        search_radius_km: float = 3.0,
    ) -> User:
        counter["n"] += 1
        name = username or f"user{counter['n']}"
        with uow_factory() as uow:
            return uow.users.add(
                User(
                    username=name,
                    email=f"{name}@example.com",
                    password_hash="not-a-real-hash",
                    location="Jung-gu",
                    coordinate=coordinate,
                    temperature=temperature,
                    search_radius_km=search_radius_km,
                )
            )

    return _make


@pytest.fixture
def make_post(uow_factory):
    """Create a trade post through the use case."""

    def _make(
        seller: User,
        title: str = "Bicycle",
        description: str = "Barely used",
        price: int = 10000,
        coordinate: Coordinate | None = None,
        image_urls: list[str] | None = None,
    ) -> TradePostResult:
        return CreateTradePostUseCase(uow_factory).execute(
            CreateTradePostCommand(
                user_id=seller.id,
                title=title,
                description=description,
                price=price,
                image_urls=image_urls or [],
                latitude=coordinate.latitude if coordinate else None,
                longitude=coordinate.longitude if coordinate else None,
            )
        )

    return _make


@pytest.fixture
def client(engine):
    """TestClient bound to the per-test database, with fresh rate-limit counters."""
    from app.interfaces.market.dependencies import get_engine
    from app.main import app
    from app.shared.security.rate_limiting import limiter

    limiter.reset()
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
