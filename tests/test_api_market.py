"""
Tests for the market API endpoints.

Tests FastAPI routes end to end against the per-test SQLite database.
Validates request validation, response schemas, and error mapping.
"""

from app.core.config import settings
from app.interfaces.market.dependencies import get_current_user_id
from app.shared.security.headers import SECURE_HEADERS
from app.shared.security.rate_limiting import limiter

API = "/api/v1"


def _register(client, username: str, latitude: float = 37.5663, longitude: float = 126.9779):
    response = client.post(
        f"{API}/users",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "correct horse",
            "location": "Jung-gu",
            "latitude": latitude,
            "longitude": longitude,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def _as(user: dict) -> dict[str, str]:
    return {"X-User-Id": str(user["id"])}


def _create_post(client, seller: dict, title: str = "Bicycle", price: int = 10000) -> dict:
    response = client.post(
        f"{API}/trade-posts",
        json={"title": title, "description": "Barely used", "price": price},
        headers=_as(seller),
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealthEndpoint:
    """Tests for GET /api/v1/health."""

    def test_health_reports_database(self, client) -> None:
        response = client.get(f"{API}/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["database"] == "ok"


class TestUsersEndpoint:
    """Tests for /api/v1/users."""

    def test_register_and_read_profile(self, client) -> None:
        user = _register(client, "erin")
        assert "password_hash" not in user
        response = client.get(f"{API}/users/me", headers=_as(user))
        assert response.status_code == 200
        assert response.json()["username"] == "erin"

    def test_duplicate_username_returns_409(self, client) -> None:
        _register(client, "erin")
        response = client.post(
            f"{API}/users",
            json={
                "username": "erin",
                "email": "other@example.com",
                "password": "correct horse",
                "location": "Jung-gu",
                "latitude": 37.5,
                "longitude": 127.0,
            },
        )
        assert response.status_code == 409
        assert response.json()["error"] == "Conflict"

    def test_invalid_latitude_rejected(self, client) -> None:
        response = client.post(
            f"{API}/users",
            json={
                "username": "far",
                "email": "far@example.com",
                "password": "correct horse",
                "location": "Nowhere",
                "latitude": 123.0,
                "longitude": 0.0,
            },
        )
        assert response.status_code == 422

    def test_missing_identity_header_rejected(self, client) -> None:
        assert client.get(f"{API}/users/me").status_code == 422

    def test_identity_beyond_64_bit_range_rejected(self, client) -> None:
        response = client.get(f"{API}/users/me", headers={"X-User-Id": str(2**70)})
        assert response.status_code == 422

    def test_profile_id_beyond_64_bit_range_rejected(self, client) -> None:
        user = _register(client, "erin")
        response = client.get(f"{API}/users/{2**70}", headers=_as(user))
        assert response.status_code == 422

    def test_unknown_user_returns_404(self, client) -> None:
        response = client.get(f"{API}/users/me", headers={"X-User-Id": "999"})
        assert response.status_code == 404
        assert response.json() == {"error": "Not found", "detail": "User not found: 999"}

    def test_search_radius_above_maximum(self, client) -> None:
        user = _register(client, "erin")
        response = client.patch(
            f"{API}/users/me/search-radius", json={"radius_km": 10_000}, headers=_as(user)
        )
        assert response.status_code == 400

    def test_wrong_password_returns_403(self, client) -> None:
        user = _register(client, "erin")
        response = client.patch(
            f"{API}/users/me/password",
            json={
                "current_password": "nope",
                "new_password": "battery staple",
                "confirm_password": "battery staple",
            },
            headers=_as(user),
        )
        assert response.status_code == 403

    def test_warmest_users(self, client) -> None:
        users = [_register(client, f"u{i}") for i in range(4)]
        response = client.get(f"{API}/users/warmest")
        assert response.status_code == 200
        # equal temperatures: lowest ids win
        assert [u["id"] for u in response.json()] == [u["id"] for u in users[:3]]


class TestTradePostsEndpoint:
    """Tests for /api/v1/trade-posts."""

    def test_full_trade_flow(self, client) -> None:
        seller, buyer = _register(client, "seller"), _register(client, "buyer")
        post = _create_post(client, seller)
        post_id = post["post_id"]

        reserved = client.post(
            f"{API}/trade-posts/{post_id}/reservation",
            json={"buyer_id": buyer["id"]},
            headers=_as(seller),
        )
        assert reserved.status_code == 200
        assert reserved.json()["status"] == "RESERVATION"

        confirmed = client.post(f"{API}/trade-posts/{post_id}/confirm", headers=_as(seller))
        assert confirmed.json()["status"] == "COMPLETED"

        cancelled = client.delete(
            f"{API}/trade-posts/{post_id}/reservation", headers=_as(seller)
        )
        assert cancelled.status_code == 400
        assert cancelled.json()["error"] == "Invalid request"

        bought = client.get(f"{API}/users/me/buy-posts", headers=_as(buyer))
        assert [p["post_id"] for p in bought.json()] == [post_id]

    def test_reserve_by_non_seller_returns_403(self, client) -> None:
        seller, buyer = _register(client, "seller"), _register(client, "buyer")
        post = _create_post(client, seller)
        response = client.post(
            f"{API}/trade-posts/{post['post_id']}/reservation",
            json={"buyer_id": buyer["id"]},
            headers=_as(buyer),
        )
        assert response.status_code == 403

    def test_get_counts_views(self, client) -> None:
        seller, viewer = _register(client, "seller"), _register(client, "viewer")
        post = _create_post(client, seller)
        url = f"{API}/trade-posts/{post['post_id']}"
        client.get(url, headers=_as(viewer))
        detail = client.get(url, headers=_as(viewer)).json()
        assert detail["post"]["view_count"] == 2
        assert detail["seller"]["username"] == "seller"
        assert detail["buyer"] is None

    def test_missing_post_returns_404(self, client) -> None:
        user = _register(client, "erin")
        response = client.get(f"{API}/trade-posts/404", headers=_as(user))
        assert response.status_code == 404

    def test_post_id_beyond_64_bit_range_rejected(self, client) -> None:
        user = _register(client, "erin")
        response = client.get(f"{API}/trade-posts/{2**70}", headers=_as(user))
        assert response.status_code == 422

    def test_largest_post_id_is_not_found(self, client) -> None:
        user = _register(client, "erin")
        response = client.get(f"{API}/trade-posts/{2**63 - 1}", headers=_as(user))
        assert response.status_code == 404

    def test_reserve_buyer_beyond_64_bit_range_rejected(self, client) -> None:
        seller = _register(client, "seller")
        post = _create_post(client, seller)
        response = client.post(
            f"{API}/trade-posts/{post['post_id']}/reservation",
            json={"buyer_id": 2**70},
            headers=_as(seller),
        )
        assert response.status_code == 422

    def test_top_liked_unknown_viewer_returns_404(self, client) -> None:
        response = client.get(f"{API}/trade-posts/top-liked", headers={"X-User-Id": "999"})
        assert response.status_code == 404

    def test_negative_price_rejected(self, client) -> None:
        seller = _register(client, "seller")
        response = client.post(
            f"{API}/trade-posts",
            json={"title": "Bike", "price": -1},
            headers=_as(seller),
        )
        assert response.status_code == 422

    def test_like_toggle_and_self_like(self, client) -> None:
        seller, fan = _register(client, "seller"), _register(client, "fan")
        post = _create_post(client, seller)
        url = f"{API}/trade-posts/{post['post_id']}/like"

        assert client.post(url, headers=_as(fan)).json() == {
            "post_id": post["post_id"],
            "liked": True,
            "like_count": 1,
        }
        assert client.post(url, headers=_as(fan)).json()["liked"] is False
        assert client.post(url, headers=_as(seller)).status_code == 400

    def test_discovery_page(self, client) -> None:
        seller = _register(client, "seller")
        far_seller = _register(client, "busan", latitude=35.1796, longitude=129.0756)
        viewer = _register(client, "viewer")
        for i in range(3):
            _create_post(client, seller, title=f"Chair {i}")
        _create_post(client, far_seller, title="Chair far away")

        response = client.get(
            f"{API}/trade-posts",
            params={"keyword": "chair", "page": 0, "size": 2},
            headers=_as(viewer),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert body["total_pages"] == 2
        assert [p["title"] for p in body["posts"]] == ["Chair 2", "Chair 1"]

    def test_discovery_page_size_above_maximum(self, client) -> None:
        viewer = _register(client, "viewer")
        response = client.get(
            f"{API}/trade-posts", params={"size": 1000}, headers=_as(viewer)
        )
        assert response.status_code == 400

    def test_top_liked(self, client) -> None:
        seller, fan = _register(client, "seller"), _register(client, "fan")
        posts = [_create_post(client, seller, title=f"P{i}") for i in range(4)]
        client.post(f"{API}/trade-posts/{posts[2]['post_id']}/like", headers=_as(fan))

        response = client.get(f"{API}/trade-posts/top-liked", headers=_as(fan))
        assert [p["post_id"] for p in response.json()] == [
            posts[2]["post_id"],
            posts[0]["post_id"],
            posts[1]["post_id"],
        ]

    def test_delete_reserved_post_rejected(self, client) -> None:
        seller, buyer = _register(client, "seller"), _register(client, "buyer")
        post = _create_post(client, seller)
        url = f"{API}/trade-posts/{post['post_id']}"
        client.post(f"{url}/reservation", json={"buyer_id": buyer["id"]}, headers=_as(seller))

        assert client.delete(url, headers=_as(seller)).status_code == 400
        client.delete(f"{url}/reservation", headers=_as(seller))
        assert client.delete(url, headers=_as(seller)).status_code == 204
        assert client.get(url, headers=_as(seller)).status_code == 404


class TestNeighborPostsEndpoint:
    """Tests for /api/v1/neighbor-posts."""

    def test_publish_like_and_list(self, client) -> None:
        author, fan = _register(client, "author"), _register(client, "fan")
        created = client.post(
            f"{API}/neighbor-posts", json={"content": "Lost cat"}, headers=_as(author)
        )
        assert created.status_code == 201
        post_id = created.json()["post_id"]

        client.post(f"{API}/neighbor-posts/{post_id}/like", headers=_as(fan))
        liked = client.get(f"{API}/users/me/like-neighbor-posts", headers=_as(fan))
        assert [p["post_id"] for p in liked.json()] == [post_id]

        feed = client.get(f"{API}/neighbor-posts", params={"keyword": "cat"}, headers=_as(fan))
        assert feed.json()[0]["is_liked"] is True

    def test_edit_by_other_user_forbidden(self, client) -> None:
        author, other = _register(client, "author"), _register(client, "other")
        post_id = client.post(
            f"{API}/neighbor-posts", json={"content": "Hello"}, headers=_as(author)
        ).json()["post_id"]
        response = client.put(
            f"{API}/neighbor-posts/{post_id}", json={"content": "Hijack"}, headers=_as(other)
        )
        assert response.status_code == 403

    def test_blank_content_rejected(self, client) -> None:
        author = _register(client, "author")
        response = client.post(
            f"{API}/neighbor-posts", json={"content": ""}, headers=_as(author)
        )
        assert response.status_code == 422


class TestSecurityHeaders:
    """Tests for security headers on responses."""

    def test_security_headers_present(self, client) -> None:
        response = client.get(f"{API}/health")
        for name, value in SECURE_HEADERS.items():
            assert response.headers[name] == value


class TestRateLimiting:
    """Tests for the slowapi limiter configuration."""

    def test_default_limit_comes_from_settings(self) -> None:
        configured = [
            item.limit for group in limiter._default_limits for item in group
        ]
        assert [lim.amount for lim in configured] == [
            int(settings.rate_limit_default.split("/")[0])
        ]


class TestDependencyOverrides:
    """The identity dependency can be swapped like any other provider."""

    def test_current_user_override(self, client) -> None:
        user = _register(client, "erin")
        client.app.dependency_overrides[get_current_user_id] = lambda: user["id"]
        response = client.get(f"{API}/users/me")
        assert response.status_code == 200
        assert response.json()["id"] == user["id"]
