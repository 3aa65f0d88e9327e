"""Platform fetchers: HackerOne plus placeholders for other platforms."""

from scopeharvest.platforms.base import BaseFetcher, FetchResult, ProgramFetcher
from scopeharvest.platforms.hackerone import HackerOneFetcher
from scopeharvest.platforms.placeholder import NotImplementedFetcher
from scopeharvest.platforms.state_machine import FetchState, FetchStateMachine


__all__ = [
    "BaseFetcher",
    "FetchResult",
    "FetchState",
    "FetchStateMachine",
    "HackerOneFetcher",
    "NotImplementedFetcher",
    "ProgramFetcher",
]
