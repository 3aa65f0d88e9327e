"""Unit tests for the fetch state machine."""

import pytest

from scopeharvest.platforms.state_machine import (
    FetchState,
    FetchStateMachine,
    FetchStateTransitionError,
)


class TestFetchState:
    """Tests for FetchState enum."""

    def test_state_count(self) -> None:
        """Verify exactly 7 states exist."""
        assert len(FetchState) == 7

    def test_values_match_names(self) -> None:
        """State values are their own names."""
        assert FetchState.LISTING_PROGRAMS == "LISTING_PROGRAMS"
        assert FetchState.DONE == "DONE"


class TestFetchStateMachine:
    """Tests for FetchStateMachine."""

    def test_initial_state_is_pending(self) -> None:
        """State machine starts in PENDING."""
        sm = FetchStateMachine(platform="hackerone", run_id="run-1")
        assert sm.state == FetchState.PENDING
        assert not sm.is_terminal

    def test_eligible_program_cycle(self) -> None:
        """A bounty program walks listing, filtering, fetching, emitting."""
        sm = FetchStateMachine(platform="hackerone", run_id="run-1")
        sm.to_listing()
        sm.to_filtering()
        sm.to_fetching_scope()
        sm.to_emitting()
        sm.to_filtering()
        sm.to_listing()
        sm.to_done()
        assert sm.state == FetchState.DONE
        assert sm.is_terminal

    def test_skipped_programs_loop_on_filtering(self) -> None:
        """Consecutive ineligible programs stay in FILTERING_PROGRAM."""
        sm = FetchStateMachine(platform="hackerone", run_id="run-1")
        sm.to_listing()
        sm.to_filtering()
        sm.to_filtering()
        sm.to_listing()
        assert sm.state == FetchState.LISTING_PROGRAMS

    def test_any_active_state_can_fail(self) -> None:
        """FAILED is reachable from every non-terminal state."""
        for state in FetchState:
            if state in (FetchState.DONE, FetchState.FAILED):
                continue
            sm = FetchStateMachine(
                platform="hackerone", run_id="run-1", initial_state=state
            )
            assert sm.can_transition_to(FetchState.FAILED)

    def test_cannot_skip_scope_fetch(self) -> None:
        """FILTERING -> EMITTING is invalid."""
        sm = FetchStateMachine(
            platform="hackerone",
            run_id="run-1",
            initial_state=FetchState.FILTERING_PROGRAM,
        )

        with pytest.raises(FetchStateTransitionError) as exc_info:
            sm.to_emitting()

        assert exc_info.value.from_state == FetchState.FILTERING_PROGRAM
        assert exc_info.value.to_state == FetchState.EMITTING_ASSETS
        assert "hackerone" in str(exc_info.value)

    @pytest.mark.parametrize("terminal", [FetchState.DONE, FetchState.FAILED])
    def test_terminal_states_have_no_exits(self, terminal: FetchState) -> None:
        """Terminal states reject every transition."""
        sm = FetchStateMachine(
            platform="hackerone", run_id="run-1", initial_state=terminal
        )

        for target in FetchState:
            assert not sm.can_transition_to(target)
        with pytest.raises(FetchStateTransitionError):
            sm.to_listing()
