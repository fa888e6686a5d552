from datetime import datetime, timedelta, timezone

from studio_booking.repositories import RepositoryFactory

START = datetime(2030, 1, 7, 10, 0, tzinfo=timezone.utc)


def _ids(bookings):
    return {booking.id for booking in bookings}


class TestActiveBookingsInWindow:
    def test_window_bounds_are_inclusive(self, db, studio, client_record, make_booking):
        ends_at_window_start = make_booking(studio, client_record, START - timedelta(hours=1), START)
        starts_at_window_end = make_booking(
            studio, client_record, START + timedelta(hours=1), START + timedelta(hours=2)
        )
        make_booking(studio, client_record, START + timedelta(hours=3), START + timedelta(hours=4))
        repo = RepositoryFactory.create_conflict_checker_repository(db)

        found = repo.get_active_bookings_in_window(studio.id, START, START + timedelta(hours=1))

        assert _ids(found) == {ends_at_window_start.id, starts_at_window_end.id}

    def test_inactive_statuses_are_ignored(self, db, studio, client_record, make_booking):
        make_booking(studio, client_record, START, START + timedelta(hours=1), status="CANCELLED")
        make_booking(studio, client_record, START, START + timedelta(hours=1), status="COMPLETED")
        make_booking(studio, client_record, START, START + timedelta(hours=1), status="NO_SHOW")
        active = [
            make_booking(studio, client_record, START, START + timedelta(hours=1), status=status)
            for status in ("PENDING", "CONFIRMED", "IN_PROGRESS")
        ]
        repo = RepositoryFactory.create_conflict_checker_repository(db)

        found = repo.get_active_bookings_in_window(studio.id, START, START + timedelta(hours=1))

        assert _ids(found) == _ids(active)

    def test_room_scope(self, db, studio, client_record, make_room, make_booking):
        room_a = make_room(studio, name="A")
        room_b = make_room(studio, name="B")
        in_a = make_booking(studio, client_record, START, START + timedelta(hours=1), room_id=room_a.id)
        in_b = make_booking(studio, client_record, START, START + timedelta(hours=1), room_id=room_b.id)
        whole_studio = make_booking(studio, client_record, START, START + timedelta(hours=1))
        repo = RepositoryFactory.create_conflict_checker_repository(db)
        window = (START, START + timedelta(hours=1))

        assert _ids(repo.get_active_bookings_in_window(studio.id, *window, room_id=room_a.id)) == {
            in_a.id,
            whole_studio.id,
        }
        assert _ids(repo.get_active_bookings_in_window(studio.id, *window)) == {
            in_a.id,
            in_b.id,
            whole_studio.id,
        }

    def test_exclude_booking(self, db, studio, client_record, make_booking):
        booking = make_booking(studio, client_record, START, START + timedelta(hours=1))
        repo = RepositoryFactory.create_conflict_checker_repository(db)

        found = repo.get_active_bookings_in_window(
            studio.id, START, START + timedelta(hours=1), exclude_booking_id=booking.id
        )

        assert found == []

    def test_other_studios_are_ignored(
        self, db, studio, make_studio, make_client, client_record, make_booking
    ):
        other = make_studio(name="Elsewhere", email="elsewhere@example.com")
        make_booking(other, make_client(other), START, START + timedelta(hours=1))
        repo = RepositoryFactory.create_conflict_checker_repository(db)

        assert repo.get_active_bookings_in_window(studio.id, START, START + timedelta(hours=1)) == []
