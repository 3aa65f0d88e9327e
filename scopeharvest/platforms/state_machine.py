"""State machine for a platform fetch."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class FetchState(str, Enum):
    """State of a platform fetch.

    - PENDING: Not yet started
    - LISTING_PROGRAMS: Requesting and decoding a programs page
    - FILTERING_PROGRAM: Checking the next program on the page
    - FETCHING_SCOPE: Requesting and decoding a program's scopes
    - EMITTING_ASSETS: Writing eligible assets to the output
    - DONE: An empty page ended the listing
    - FAILED: Aborted with an error
    """

    PENDING = "PENDING"
    LISTING_PROGRAMS = "LISTING_PROGRAMS"
    FILTERING_PROGRAM = "FILTERING_PROGRAM"
    FETCHING_SCOPE = "FETCHING_SCOPE"
    EMITTING_ASSETS = "EMITTING_ASSETS"
    DONE = "DONE"
    FAILED = "FAILED"


# Valid state transitions
_VALID_TRANSITIONS: dict[FetchState, set[FetchState]] = {
    FetchState.PENDING: {FetchState.LISTING_PROGRAMS, FetchState.FAILED},
    FetchState.LISTING_PROGRAMS: {
        FetchState.FILTERING_PROGRAM,
        FetchState.DONE,
        FetchState.FAILED,
    },
    # Ineligible programs loop back to the next program or the next page
    FetchState.FILTERING_PROGRAM: {
        FetchState.FILTERING_PROGRAM,
        FetchState.FETCHING_SCOPE,
        FetchState.LISTING_PROGRAMS,
        FetchState.FAILED,
    },
    FetchState.FETCHING_SCOPE: {FetchState.EMITTING_ASSETS, FetchState.FAILED},
    FetchState.EMITTING_ASSETS: {
        FetchState.FILTERING_PROGRAM,
        FetchState.LISTING_PROGRAMS,
        FetchState.FAILED,
    },
    FetchState.DONE: set(),  # Terminal state
    FetchState.FAILED: set(),  # Terminal state
}


class FetchStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        platform: str,
        from_state: FetchState,
        to_state: FetchState,
    ) -> None:
        """Initialize the transition error.

        Args:
            platform: Platform being fetched.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.platform = platform
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for platform '{platform}': "
            f"{from_state.value} -> {to_state.value}"
        )


class FetchStateMachine:
    """Tracks the state of one platform fetch and enforces valid transitions."""

    def __init__(
        self,
        platform: str,
        run_id: str,
        initial_state: FetchState = FetchState.PENDING,
    ) -> None:
        self._platform = platform
        self._state = initial_state
        self._log = logger.bind(component="fetcher", run_id=run_id, platform=platform)

    @property
    def state(self) -> FetchState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (FetchState.DONE, FetchState.FAILED)

    def can_transition_to(self, target: FetchState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: FetchState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            FetchStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise FetchStateTransitionError(self._platform, self._state, target)

        old_state = self._state
        self._state = target
        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_listing(self) -> None:
        """Transition to LISTING_PROGRAMS."""
        self.transition_to(FetchState.LISTING_PROGRAMS)

    def to_filtering(self) -> None:
        """Transition to FILTERING_PROGRAM."""
        self.transition_to(FetchState.FILTERING_PROGRAM)

    def to_fetching_scope(self) -> None:
        """Transition to FETCHING_SCOPE."""
        self.transition_to(FetchState.FETCHING_SCOPE)

    def to_emitting(self) -> None:
        """Transition to EMITTING_ASSETS."""
        self.transition_to(FetchState.EMITTING_ASSETS)

    def to_done(self) -> None:
        """Transition to DONE."""
        self.transition_to(FetchState.DONE)

    def to_failed(self) -> None:
        """Transition to FAILED."""
        self.transition_to(FetchState.FAILED)
