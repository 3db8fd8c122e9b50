"""Tests for the bounded polling primitive."""

from unittest.mock import MagicMock

from ros_ocp_installer.utils.polling import poll_until


class TestPollUntil:
    """Tests for poll_until."""

    def test_returns_immediately_when_condition_already_holds(self) -> None:
        sleep = MagicMock()

        result = poll_until(lambda: True, interval=2, timeout=60, sleep=sleep)

        assert result.satisfied is True
        assert result.attempts == 1
        assert result.elapsed == 0
        sleep.assert_not_called()

    def test_stops_as_soon_as_condition_becomes_true(self) -> None:
        """Polling must not run to the ceiling once the condition holds."""
        answers = iter([False, False, True])
        sleep = MagicMock()

        result = poll_until(lambda: next(answers), interval=2, timeout=60, sleep=sleep)

        assert result.satisfied is True
        assert result.attempts == 3
        assert result.elapsed == 4
        assert sleep.call_count == 2

    def test_gives_up_at_the_ceiling(self) -> None:
        sleep = MagicMock()

        result = poll_until(lambda: False, interval=2, timeout=10, sleep=sleep)

        assert result.satisfied is False
        assert result.elapsed == 10
        # Evaluated at 0, 2, 4, 6, 8 and 10 seconds
        assert result.attempts == 6
        assert sleep.call_count == 5

    def test_on_wait_receives_elapsed_seconds(self) -> None:
        seen: list[float] = []

        poll_until(
            lambda: False,
            interval=3,
            timeout=9,
            on_wait=seen.append,
            sleep=lambda _: None,
        )

        assert seen == [0, 3, 6]
