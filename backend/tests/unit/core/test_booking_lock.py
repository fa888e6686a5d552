import threading

import pytest

from studio_booking.core.booking_lock import studio_booking_lock
from studio_booking.core.exceptions import BookingLockTimeoutException


def test_lock_can_be_reacquired_after_release():
    with studio_booking_lock("studio-seq", 1):
        pass
    with studio_booking_lock("studio-seq", 1):
        pass


def test_second_holder_times_out():
    held = threading.Event()
    release = threading.Event()

    def holder():
        with studio_booking_lock("studio-busy", 1):
            held.set()
            release.wait(5)

    thread = threading.Thread(target=holder)
    thread.start()
    try:
        assert held.wait(5)
        with pytest.raises(BookingLockTimeoutException) as exc_info:
            with studio_booking_lock("studio-busy", 0.05):
                pass
        assert exc_info.value.code == "BOOKING_LOCK_TIMEOUT"
        assert exc_info.value.status_code == 409
    finally:
        release.set()
        thread.join()


def test_different_studios_do_not_block_each_other():
    with studio_booking_lock("studio-a", 1):
        with studio_booking_lock("studio-b", 0.05):
            pass


def test_lock_released_when_block_raises():
    with pytest.raises(RuntimeError):
        with studio_booking_lock("studio-raise", 1):
            raise RuntimeError("boom")

    with studio_booking_lock("studio-raise", 0.05):
        pass
