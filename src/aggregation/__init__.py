from .errors import AggregationError, ApiResponseError, TeamProfileNotFoundError
from .fixture_detail import FixtureDetailAggregator
from .team_profile import TeamProfileAggregator

__all__ = [
    "AggregationError",
    "ApiResponseError",
    "TeamProfileNotFoundError",
    "FixtureDetailAggregator",
    "TeamProfileAggregator",
]
