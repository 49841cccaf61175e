"""Domain services.

- **rating_aggregator** / **recommendation_parser** -- pure functions,
  no I/O.
- **chat_service** -- one recommender turn over an ILLMProvider.
- **rating_service**, **board_service**, **list_service**,
  **listen_later_service** -- validation, ownership checks and
  aggregation over the store interfaces.
"""

from musicboard.services.board_service import BoardService
from musicboard.services.chat_service import MusicChatService
from musicboard.services.list_service import ListService
from musicboard.services.listen_later_service import ListenLaterService
from musicboard.services.rating_aggregator import (
    aggregate_ratings,
    aggregate_track_ratings,
    distribution_bucket,
)
from musicboard.services.rating_service import RatingService
from musicboard.services.recommendation_parser import parse_recommendations

__all__ = [
    "BoardService",
    "ListService",
    "ListenLaterService",
    "MusicChatService",
    "RatingService",
    "aggregate_ratings",
    "aggregate_track_ratings",
    "distribution_bucket",
    "parse_recommendations",
]
