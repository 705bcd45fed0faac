"""Tests for booking table filtering, pagination and the status lifecycle."""

import pytest

from marketplace.schemas.booking_schema import BookingStatus
from marketplace.schemas.session_schema import UserAccount, UserRole
from marketplace.tools.listing import (
    ALLOWED_TRANSITIONS,
    STATUS_DISPLAY,
    StatusAction,
    available_actions,
    can_transition,
    clamp_page,
    filter_bookings,
    filter_users,
    page_window,
    paginate,
    parse_status_filter,
    target_status,
    total_pages_for,
)


class TestFilterBookings:
    def test_pending_filter(self, bookings):
        assert len(filter_bookings(bookings, "", BookingStatus.PENDING)) == 12

    def test_all_means_no_restriction(self, bookings):
        assert len(filter_bookings(bookings, "", "all")) == 25

    def test_status_as_string(self, bookings):
        result = filter_bookings(bookings, "", "cancelled")
        assert result and all(r.status == BookingStatus.CANCELLED for r in result)

    def test_search_by_id(self, bookings):
        assert [r.id for r in filter_bookings(bookings, "bk-007")] == ["BK-007"]

    def test_search_by_client_name(self, bookings):
        assert [r.id for r in filter_bookings(bookings, "client 12")] == ["BK-012"]

    def test_search_by_service_name(self, bookings):
        result = filter_bookings(bookings, "garden")
        assert result and all(r.service_name == "Garden Maintenance" for r in result)

    def test_search_and_status_combined(self, bookings):
        result = filter_bookings(bookings, "pipe", BookingStatus.PENDING)
        assert all(r.status == BookingStatus.PENDING for r in result)
        assert all("Pipe" in r.service_name for r in result)

    def test_unknown_status_rejected(self, bookings):
        with pytest.raises(ValueError):
            filter_bookings(bookings, "", "archived")


class TestPagination:
    def test_twelve_pending_page_three_clamps_to_two(self, bookings):
        pending = filter_bookings(bookings, "", BookingStatus.PENDING)
        page = paginate(pending, 3, 10)
        assert page.total_pages == 2
        assert page.page == 2
        assert len(page.items) == 2
        assert (page.first_index, page.last_index) == (11, 12)

    def test_first_page(self, bookings):
        page = paginate(bookings, 1, 10)
        assert [r.id for r in page.items] == [f"BK-{i:03d}" for i in range(1, 11)]
        assert not page.has_previous
        assert page.has_next

    def test_page_below_one_clamps(self, bookings):
        assert paginate(bookings, 0, 10).page == 1
        assert paginate(bookings, -4, 10).page == 1

    def test_empty_table_has_one_page(self):
        page = paginate([], 1, 10)
        assert page.total_pages == 1
        assert page.items == []
        assert (page.first_index, page.last_index) == (0, 0)
        assert not page.has_next

    @pytest.mark.parametrize("total,size,expected", [
        (0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3), (25, 5, 5),
    ])
    def test_total_pages(self, total, size, expected):
        assert total_pages_for(total, size) == expected

    def test_zero_page_size_rejected(self):
        with pytest.raises(ValueError, match="page_size"):
            total_pages_for(5, 0)

    def test_pages_cover_every_item_once(self, bookings):
        seen = []
        for number in range(1, total_pages_for(len(bookings), 4) + 1):
            seen.extend(paginate(bookings, number, 4).items)
        assert seen == bookings

    def test_clamp_page(self):
        assert clamp_page(5, 3) == 3
        assert clamp_page(2, 3) == 2


class TestPageWindow:
    def test_few_pages_show_all(self):
        assert page_window(1, 3) == [1, 2, 3]

    def test_start_of_range(self):
        assert page_window(2, 10) == [1, 2, 3, 4, 5]

    def test_centred(self):
        assert page_window(6, 10) == [4, 5, 6, 7, 8]

    def test_end_of_range(self):
        assert page_window(10, 10) == [6, 7, 8, 9, 10]

    def test_custom_width(self):
        assert page_window(5, 10, width=3) == [4, 5, 6]


class TestStatusLifecycle:
    def test_pending_moves_forward(self):
        assert can_transition(BookingStatus.PENDING, BookingStatus.CONFIRMED)
        assert can_transition(BookingStatus.PENDING, BookingStatus.CANCELLED)

    def test_confirmed_to_completed(self):
        assert can_transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED)

    def test_pending_cannot_skip_to_completed(self):
        assert not can_transition(BookingStatus.PENDING, BookingStatus.COMPLETED)

    @pytest.mark.parametrize("terminal", [BookingStatus.COMPLETED, BookingStatus.CANCELLED])
    def test_terminal_states_have_no_exits(self, terminal):
        assert ALLOWED_TRANSITIONS[terminal] == frozenset()
        assert available_actions(terminal) == []

    def test_no_backwards_moves(self):
        assert not can_transition(BookingStatus.CONFIRMED, BookingStatus.PENDING)
        assert not can_transition(BookingStatus.COMPLETED, BookingStatus.CONFIRMED)

    def test_row_actions(self):
        assert available_actions(BookingStatus.PENDING) == [StatusAction.ACCEPT, StatusAction.DECLINE]
        assert StatusAction.COMPLETE in available_actions(BookingStatus.CONFIRMED)

    def test_row_actions_are_allowed_transitions(self):
        for status in BookingStatus:
            for action in available_actions(status):
                assert target_status(status, action) is not None

    def test_target_status(self):
        assert target_status(BookingStatus.PENDING, StatusAction.ACCEPT) == BookingStatus.CONFIRMED
        assert target_status(BookingStatus.COMPLETED, StatusAction.CANCEL) is None

    def test_every_status_has_a_badge(self):
        assert set(STATUS_DISPLAY) == set(BookingStatus)
        assert STATUS_DISPLAY[BookingStatus.COMPLETED].color == "green"

    def test_parse_status_filter(self):
        assert parse_status_filter("all") is None
        assert parse_status_filter(None) is None
        assert parse_status_filter("confirmed") == BookingStatus.CONFIRMED


class TestFilterUsers:
    @pytest.fixture
    def users(self):
        return [
            UserAccount(id="u1", name="Alice Admin", email="alice@example.com", role="admin"),
            UserAccount(id="u2", name="Bob Builder", email="bob@trades.example", role="provider"),
            UserAccount(id="u3", name="Carol Client", email="carol@example.com"),
        ]

    def test_search_name(self, users):
        assert [u.id for u in filter_users(users, "bob")] == ["u2"]

    def test_search_email(self, users):
        assert [u.id for u in filter_users(users, "trades")] == ["u2"]

    def test_role_filter(self, users):
        assert [u.id for u in filter_users(users, "", UserRole.CLIENT)] == ["u3"]

    def test_all_roles(self, users):
        assert len(filter_users(users, "example", "all")) == 3
