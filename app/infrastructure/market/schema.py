"""
Relational schema for the market bounded context.

SQLAlchemy Core table definitions shared by every repository adapter.
The haversine_km SQL function used by discovery queries is installed
here for PostgreSQL; SQLite connections get it from database.py.
"""

from sqlalchemy import (
    DDL,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.engine import Engine

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(50), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("location", String(120), nullable=False),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("temperature", Float, nullable=False, default=36.5),
    Column("search_radius_km", Float, nullable=False),
    Column("img_url", String(512), nullable=True),
    Column("created_at", DateTime, nullable=False),
    Column("modified_at", DateTime, nullable=False),
)

trade_posts = Table(
    "trade_posts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(120), nullable=False),
    Column("description", Text, nullable=False),
    Column("price", Integer, nullable=False),
    Column("seller_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("buyer_id", Integer, ForeignKey("users.id"), nullable=True, index=True),
    Column("status", String(16), nullable=False, index=True),
    Column("view_count", Integer, nullable=False, default=0),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("created_at", DateTime, nullable=False, index=True),
    Column("modified_at", DateTime, nullable=False),
)

trade_post_images = Table(
    "trade_post_images",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("post_id", Integer, ForeignKey("trade_posts.id"), nullable=False, index=True),
    Column("url", String(512), nullable=False),
    Column("position", Integer, nullable=False),
)

like_posts = Table(
    "like_posts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("post_id", Integer, ForeignKey("trade_posts.id"), nullable=False, index=True),
    Column("created_at", DateTime, nullable=False),
    UniqueConstraint("user_id", "post_id", name="uq_like_posts_user_post"),
)

neighbor_posts = Table(
    "neighbor_posts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("content", Text, nullable=False),
    Column("publisher_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("created_at", DateTime, nullable=False, index=True),
    Column("modified_at", DateTime, nullable=False),
)

neighbor_likes = Table(
    "neighbor_likes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("post_id", Integer, ForeignKey("neighbor_posts.id"), nullable=False, index=True),
    Column("created_at", DateTime, nullable=False),
    UniqueConstraint("user_id", "post_id", name="uq_neighbor_likes_user_post"),
)

HAVERSINE_PG_DDL = DDL(
    """
    CREATE OR REPLACE FUNCTION haversine_km(
        lat1 double precision, lon1 double precision,
        lat2 double precision, lon2 double precision
    ) RETURNS double precision AS $$
        SELECT 2 * 6371.0088 * asin(sqrt(least(1.0,
            power(sin(radians(lat2 - lat1) / 2), 2)
            + cos(radians(lat1)) * cos(radians(lat2))
              * power(sin(radians(lon2 - lon1) / 2), 2)
        )))
    $$ LANGUAGE sql IMMUTABLE
    """
)

event.listen(
    metadata, "after_create", HAVERSINE_PG_DDL.execute_if(dialect="postgresql")
)


def create_schema(engine: Engine) -> None:
    """Create missing tables (and the PostgreSQL distance function)."""
    metadata.create_all(engine)
