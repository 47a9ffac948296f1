"""Query layer - read operations that never mutate state."""

from bankster.application.queries.banking import GetAuthStatusQuery

__all__ = ["GetAuthStatusQuery"]
