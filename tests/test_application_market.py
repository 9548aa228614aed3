"""
Tests for the market application layer (use cases).

Use cases run against an in-memory SQLite database so that the
repositories, the unit of work and the SQL they emit are exercised too.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from app.application.market.delete_trade_post import DeleteTradePostUseCase
from app.application.market.discover_trade_posts import DiscoverTradePostsUseCase
from app.application.market.dtos import (
    DiscoverTradePostsQuery,
    ReserveTradePostCommand,
    TradePostActionCommand,
    UpdateTradePostCommand,
    UserPostsQuery,
)
from app.application.market.get_rankings import (
    GetTopLikedPostsUseCase,
    GetWarmestUsersUseCase,
)
from app.application.market.get_trade_post import GetTradePostUseCase
from app.application.market.get_user_trade_posts import (
    GetBuyTradePostsUseCase,
    GetLikedTradePostsUseCase,
    GetSellTradePostsUseCase,
)
from app.application.market.toggle_trade_post_like import ToggleTradePostLikeUseCase
from app.application.market.trade_reservation import (
    CancelTradeUseCase,
    ConfirmTradeUseCase,
    GetReservationUseCase,
    ReserveTradePostUseCase,
)
from app.application.market.update_trade_post import UpdateTradePostUseCase
from app.domain.market.errors import (
    DomainValidationError,
    DuplicateLikeError,
    ForbiddenError,
    TradePostNotFoundError,
    UserNotFoundError,
)
from tests.conftest import BUSAN, GANGNAM, NEAR_CITY_HALL


def _action(user, post) -> TradePostActionCommand:
    return TradePostActionCommand(user_id=user.id, post_id=post.post_id)


class TestCreateTradePost:
    """Tests for CreateTradePostUseCase."""

    def test_defaults_to_seller_coordinate(self, make_user, make_post) -> None:
        seller = make_user()
        post = make_post(seller, image_urls=["a.jpg", "b.jpg"])
        assert post.status == "TRADING"
        assert post.latitude == seller.coordinate.latitude
        assert post.image_urls == ["a.jpg", "b.jpg"]
        assert post.like_count == 0

    def test_explicit_coordinate(self, make_user, make_post) -> None:
        post = make_post(make_user(), coordinate=GANGNAM)
        assert (post.latitude, post.longitude) == (GANGNAM.latitude, GANGNAM.longitude)

    def test_unknown_seller(self, make_user, make_post) -> None:
        ghost = make_user()
        ghost.id = 999
        with pytest.raises(UserNotFoundError):
            make_post(ghost)

    def test_negative_price_rejected(self, make_user, make_post) -> None:
        with pytest.raises(DomainValidationError):
            make_post(make_user(), price=-5)


class TestGetTradePost:
    """Tests for GetTradePostUseCase."""

    def test_each_read_counts_one_view(self, uow_factory, make_user, make_post) -> None:
        seller, viewer = make_user(), make_user()
        post = make_post(seller)
        use_case = GetTradePostUseCase(uow_factory)

        first = use_case.execute(_action(viewer, post))
        second = use_case.execute(_action(viewer, post))

        assert first.post.view_count == 1
        assert second.post.view_count == 2
        assert second.seller.id == seller.id
        assert second.buyer is None

    def test_missing_post(self, uow_factory, make_user) -> None:
        viewer = make_user()
        with pytest.raises(TradePostNotFoundError):
            GetTradePostUseCase(uow_factory).execute(
                TradePostActionCommand(user_id=viewer.id, post_id=404)
            )


class TestUpdateAndDelete:
    """Tests for UpdateTradePostUseCase and DeleteTradePostUseCase."""

    def test_partial_update_keeps_other_fields(self, uow_factory, make_user, make_post) -> None:
        seller = make_user()
        post = make_post(seller, image_urls=["old.jpg"])
        result = UpdateTradePostUseCase(uow_factory).execute(
            UpdateTradePostCommand(
                user_id=seller.id, post_id=post.post_id, price=7000, image_urls=["new.jpg"]
            )
        )
        assert result.price == 7000
        assert result.title == post.title
        assert result.image_urls == ["new.jpg"]

    def test_update_keeps_view_count(self, uow_factory, make_user, make_post) -> None:
        seller, viewer = make_user(), make_user()
        post = make_post(seller)
        GetTradePostUseCase(uow_factory).execute(_action(viewer, post))
        result = UpdateTradePostUseCase(uow_factory).execute(
            UpdateTradePostCommand(user_id=seller.id, post_id=post.post_id, title="Renamed")
        )
        assert result.view_count == 1

    def test_update_by_other_user_forbidden(self, uow_factory, make_user, make_post) -> None:
        post = make_post(make_user())
        intruder = make_user()
        with pytest.raises(ForbiddenError):
            UpdateTradePostUseCase(uow_factory).execute(
                UpdateTradePostCommand(user_id=intruder.id, post_id=post.post_id, price=1)
            )

    def test_delete_removes_post_and_likes(self, uow_factory, make_user, make_post) -> None:
        seller, fan = make_user(), make_user()
        post = make_post(seller)
        ToggleTradePostLikeUseCase(uow_factory).execute(_action(fan, post))

        DeleteTradePostUseCase(uow_factory).execute(_action(seller, post))

        with uow_factory() as uow:
            assert uow.trade_posts.get_by_id(post.post_id) is None
            assert uow.trade_likes.count_for_post(post.post_id) == 0

    def test_delete_reserved_post_rejected(self, uow_factory, make_user, make_post) -> None:
        seller, buyer = make_user(), make_user()
        post = make_post(seller)
        ReserveTradePostUseCase(uow_factory).execute(
            ReserveTradePostCommand(seller_id=seller.id, buyer_id=buyer.id, post_id=post.post_id)
        )
        with pytest.raises(DomainValidationError):
            DeleteTradePostUseCase(uow_factory).execute(_action(seller, post))


class TestReservationWorkflow:
    """Tests for reserve, confirm, cancel and get_reservation."""

    def _reserve(self, uow_factory, seller, buyer, post):
        return ReserveTradePostUseCase(uow_factory).execute(
            ReserveTradePostCommand(seller_id=seller.id, buyer_id=buyer.id, post_id=post.post_id)
        )

    def test_reserve_then_confirm(self, uow_factory, make_user, make_post) -> None:
        seller, buyer = make_user(), make_user()
        post = make_post(seller)

        reserved = self._reserve(uow_factory, seller, buyer, post)
        assert reserved.status == "RESERVATION"
        assert reserved.buyer.id == buyer.id

        confirmed = ConfirmTradeUseCase(uow_factory).execute(_action(seller, post))
        assert confirmed.status == "COMPLETED"
        assert confirmed.buyer.id == buyer.id

    def test_cancel_after_confirm_fails(self, uow_factory, make_user, make_post) -> None:
        seller, buyer = make_user(), make_user()
        post = make_post(seller)
        self._reserve(uow_factory, seller, buyer, post)
        ConfirmTradeUseCase(uow_factory).execute(_action(seller, post))

        with pytest.raises(DomainValidationError):
            CancelTradeUseCase(uow_factory).execute(_action(seller, post))

    def test_cancel_clears_buyer(self, uow_factory, make_user, make_post) -> None:
        seller, buyer = make_user(), make_user()
        post = make_post(seller)
        self._reserve(uow_factory, seller, buyer, post)

        cancelled = CancelTradeUseCase(uow_factory).execute(_action(seller, post))
        assert cancelled.status == "TRADING"
        assert cancelled.buyer is None

        current = GetReservationUseCase(uow_factory).execute(_action(seller, post))
        assert current.buyer is None

    def test_confirm_without_reservation_fails(self, uow_factory, make_user, make_post) -> None:
        seller = make_user()
        post = make_post(seller)
        with pytest.raises(DomainValidationError):
            ConfirmTradeUseCase(uow_factory).execute(_action(seller, post))

    def test_reserve_unknown_buyer(self, uow_factory, make_user, make_post) -> None:
        seller = make_user()
        post = make_post(seller)
        with pytest.raises(UserNotFoundError):
            ReserveTradePostUseCase(uow_factory).execute(
                ReserveTradePostCommand(seller_id=seller.id, buyer_id=999, post_id=post.post_id)
            )

    def test_reservation_hidden_from_non_seller(self, uow_factory, make_user, make_post) -> None:
        seller, buyer = make_user(), make_user()
        post = make_post(seller)
        self._reserve(uow_factory, seller, buyer, post)
        with pytest.raises(ForbiddenError):
            GetReservationUseCase(uow_factory).execute(_action(buyer, post))

    def test_failed_transition_leaves_post_unchanged(
        self, uow_factory, make_user, make_post
    ) -> None:
        seller, buyer, other = make_user(), make_user(), make_user()
        post = make_post(seller)
        self._reserve(uow_factory, seller, buyer, post)

        with pytest.raises(DomainValidationError):
            self._reserve(uow_factory, seller, other, post)

        current = GetReservationUseCase(uow_factory).execute(_action(seller, post))
        assert current.buyer.id == buyer.id


class TestLikeToggle:
    """Tests for ToggleTradePostLikeUseCase."""

    def test_toggle_twice_restores_state(self, uow_factory, make_user, make_post) -> None:
        seller, fan = make_user(), make_user()
        post = make_post(seller)
        use_case = ToggleTradePostLikeUseCase(uow_factory)

        liked = use_case.execute(_action(fan, post))
        assert (liked.liked, liked.like_count) == (True, 1)

        unliked = use_case.execute(_action(fan, post))
        assert (unliked.liked, unliked.like_count) == (False, 0)

    def test_seller_cannot_like_own_post(self, uow_factory, make_user, make_post) -> None:
        seller = make_user()
        post = make_post(seller)
        with pytest.raises(DomainValidationError):
            ToggleTradePostLikeUseCase(uow_factory).execute(_action(seller, post))

    def test_duplicate_insert_keeps_single_row(self, uow_factory, make_user, make_post) -> None:
        seller, fan = make_user(), make_user()
        post = make_post(seller)
        ToggleTradePostLikeUseCase(uow_factory).execute(_action(fan, post))

        with uow_factory() as uow:
            with pytest.raises(DuplicateLikeError):
                uow.trade_likes.add(uow.trade_likes.new(fan.id, post.post_id))
            # the savepoint kept the outer transaction usable
            assert uow.trade_likes.count_for_post(post.post_id) == 1

    def test_other_integrity_failures_are_not_duplicates(
        self, uow_factory, make_user, make_post
    ) -> None:
        post = make_post(make_user())

        with uow_factory() as uow:
            with pytest.raises(IntegrityError):
                uow.trade_likes.add(uow.trade_likes.new(None, post.post_id))
            assert uow.trade_likes.count_for_post(post.post_id) == 0


class TestUserTradePosts:
    """Buy, sell and like histories."""

    def test_buy_and_sell_histories(self, uow_factory, make_user, make_post) -> None:
        seller, buyer = make_user(), make_user()
        p1 = make_post(seller, title="P1")
        p2 = make_post(seller, title="P2")
        ReserveTradePostUseCase(uow_factory).execute(
            ReserveTradePostCommand(seller_id=seller.id, buyer_id=buyer.id, post_id=p1.post_id)
        )

        bought = GetBuyTradePostsUseCase(uow_factory).execute(
            UserPostsQuery(viewer_id=buyer.id, user_id=buyer.id)
        )
        assert bought == []

        ConfirmTradeUseCase(uow_factory).execute(_action(seller, p1))

        bought = GetBuyTradePostsUseCase(uow_factory).execute(
            UserPostsQuery(viewer_id=buyer.id, user_id=buyer.id)
        )
        sold = GetSellTradePostsUseCase(uow_factory).execute(
            UserPostsQuery(viewer_id=buyer.id, user_id=seller.id)
        )
        assert [p.post_id for p in bought] == [p1.post_id]
        assert [p.post_id for p in sold] == [p1.post_id, p2.post_id]

    def test_liked_posts_in_like_order(self, uow_factory, make_user, make_post) -> None:
        seller, fan = make_user(), make_user()
        p1 = make_post(seller, title="P1")
        p2 = make_post(seller, title="P2")
        toggle = ToggleTradePostLikeUseCase(uow_factory)
        toggle.execute(_action(fan, p2))
        toggle.execute(_action(fan, p1))

        liked = GetLikedTradePostsUseCase(uow_factory).execute(
            UserPostsQuery(viewer_id=fan.id, user_id=fan.id)
        )
        assert [p.post_id for p in liked] == [p2.post_id, p1.post_id]
        assert all(p.is_liked for p in liked)
        assert all(p.like_count == 1 for p in liked)

    def test_sell_posts_flag_viewer_likes(self, uow_factory, make_user, make_post) -> None:
        seller, fan = make_user(), make_user()
        p1 = make_post(seller, title="P1")
        make_post(seller, title="P2")
        ToggleTradePostLikeUseCase(uow_factory).execute(_action(fan, p1))

        sold = GetSellTradePostsUseCase(uow_factory).execute(
            UserPostsQuery(viewer_id=fan.id, user_id=seller.id)
        )
        assert [p.is_liked for p in sold] == [True, False]


class TestRankings:
    """Tests for the top-liked and warmest rankings."""

    def test_top_liked_ties_broken_by_lowest_id(self, uow_factory, make_user, make_post) -> None:
        seller = make_user()
        fans = [make_user() for _ in range(3)]
        posts = [make_post(seller, title=f"P{i}") for i in range(4)]
        toggle = ToggleTradePostLikeUseCase(uow_factory)
        # P3 gets 2 likes, P1 and P2 get 1, P0 none
        toggle.execute(_action(fans[0], posts[3]))
        toggle.execute(_action(fans[1], posts[3]))
        toggle.execute(_action(fans[0], posts[2]))
        toggle.execute(_action(fans[0], posts[1]))

        top = GetTopLikedPostsUseCase(uow_factory, ranking_size=3).execute(fans[0].id)
        assert [p.post_id for p in top] == [posts[3].post_id, posts[1].post_id, posts[2].post_id]
        assert [p.like_count for p in top] == [2, 1, 1]
        assert all(p.is_liked for p in top)

    def test_top_liked_with_few_posts(self, uow_factory, make_user, make_post) -> None:
        post = make_post(make_user())
        top = GetTopLikedPostsUseCase(uow_factory).execute(post.seller_id)
        assert [p.post_id for p in top] == [post.post_id]
        assert top[0].like_count == 0

    def test_top_liked_unknown_viewer(self, uow_factory, make_user, make_post) -> None:
        make_post(make_user())
        with pytest.raises(UserNotFoundError):
            GetTopLikedPostsUseCase(uow_factory).execute(9999)

    def test_warmest_users(self, uow_factory, make_user) -> None:
        cold = make_user(temperature=30.0)
        warm_a = make_user(temperature=40.0)
        warm_b = make_user(temperature=40.0)
        mid = make_user(temperature=36.5)

        warmest = GetWarmestUsersUseCase(uow_factory, ranking_size=3).execute()
        assert [u.id for u in warmest] == [warm_a.id, warm_b.id, mid.id]
        assert cold.id not in [u.id for u in warmest]


class TestDiscovery:
    """Tests for DiscoverTradePostsUseCase."""

    def _discover(self, uow_factory, viewer, **kwargs):
        return DiscoverTradePostsUseCase(uow_factory).execute(
            DiscoverTradePostsQuery(user_id=viewer.id, **kwargs)
        )

    def test_only_posts_within_radius(self, uow_factory, make_user, make_post) -> None:
        viewer, seller = make_user(search_radius_km=3.0), make_user()
        near = make_post(seller, coordinate=NEAR_CITY_HALL)
        make_post(seller, coordinate=GANGNAM)
        make_post(seller, coordinate=BUSAN)

        page = self._discover(uow_factory, viewer)
        assert [p.post_id for p in page.posts] == [near.post_id]
        assert page.total == 1

    def test_larger_radius_reaches_further(self, uow_factory, make_user, make_post) -> None:
        viewer, seller = make_user(search_radius_km=10.0), make_user()
        make_post(seller, coordinate=NEAR_CITY_HALL)
        make_post(seller, coordinate=GANGNAM)
        make_post(seller, coordinate=BUSAN)
        assert self._discover(uow_factory, viewer).total == 2

    def test_zero_radius_matches_nothing(self, uow_factory, make_user, make_post) -> None:
        viewer, seller = make_user(search_radius_km=0.0), make_user()
        make_post(seller)
        page = self._discover(uow_factory, viewer)
        assert page.posts == []
        assert page.total == 0

    def test_keyword_is_case_insensitive(self, uow_factory, make_user, make_post) -> None:
        viewer, seller = make_user(), make_user()
        bike = make_post(seller, title="Road BIKE")
        desc = make_post(seller, title="Helmet", description="fits any bike")
        make_post(seller, title="Lamp")

        page = self._discover(uow_factory, viewer, keyword="bike")
        assert {p.post_id for p in page.posts} == {bike.post_id, desc.post_id}
        assert page.total == 2

    def test_keyword_matches_non_ascii_capitals(self, uow_factory, make_user, make_post) -> None:
        viewer, seller = make_user(), make_user()
        jacket = make_post(seller, title="Ärmel Jacke")
        make_post(seller, title="Armchair")

        for keyword in ("Ärmel", "ärmel", "ÄRMEL"):
            page = self._discover(uow_factory, viewer, keyword=keyword)
            assert [p.post_id for p in page.posts] == [jacket.post_id]
            assert page.total == 1

    def test_keyword_wildcards_match_literally(self, uow_factory, make_user, make_post) -> None:
        viewer, seller = make_user(), make_user()
        sale = make_post(seller, title="50% off jacket")
        make_post(seller, title="500 won sticker")
        under = make_post(seller, title="snake_case mug")
        make_post(seller, title="snakes mug")

        assert [p.post_id for p in self._discover(uow_factory, viewer, keyword="50%").posts] == [
            sale.post_id
        ]
        assert [p.post_id for p in self._discover(uow_factory, viewer, keyword="e_c").posts] == [
            under.post_id
        ]

    def test_paging_newest_first_with_total(self, uow_factory, make_user, make_post) -> None:
        viewer, seller = make_user(), make_user()
        posts = [make_post(seller, title=f"Item {i}") for i in range(5)]
        newest_first = [p.post_id for p in reversed(posts)]

        first = self._discover(uow_factory, viewer, page=0, size=2)
        last = self._discover(uow_factory, viewer, page=2, size=2)

        assert [p.post_id for p in first.posts] == newest_first[:2]
        assert [p.post_id for p in last.posts] == newest_first[4:]
        assert first.total == last.total == 5
        assert first.total_pages == 3

    def test_trading_only_hides_completed(self, uow_factory, make_user, make_post) -> None:
        viewer, seller, buyer = make_user(), make_user(), make_user()
        sold = make_post(seller, title="Sold")
        open_post = make_post(seller, title="Open")
        ReserveTradePostUseCase(uow_factory).execute(
            ReserveTradePostCommand(seller_id=seller.id, buyer_id=buyer.id, post_id=sold.post_id)
        )
        ConfirmTradeUseCase(uow_factory).execute(_action(seller, sold))

        page = self._discover(uow_factory, viewer, trading_only=True)
        assert [p.post_id for p in page.posts] == [open_post.post_id]
        assert self._discover(uow_factory, viewer).total == 2

    def test_page_size_above_maximum_rejected(self, uow_factory, make_user) -> None:
        viewer = make_user()
        with pytest.raises(DomainValidationError):
            DiscoverTradePostsUseCase(uow_factory, max_page_size=10).execute(
                DiscoverTradePostsQuery(user_id=viewer.id, size=11)
            )

    def test_zero_page_size_rejected(self, uow_factory, make_user) -> None:
        with pytest.raises(DomainValidationError):
            self._discover(uow_factory, make_user(), size=0)
