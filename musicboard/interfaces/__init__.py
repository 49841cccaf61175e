"""Abstract interfaces for swappable backends.

The chat model, the token cache and the five stores are reached only
through the ABCs below, so a hosted backend (Postgres, Redis, a different
model gateway) can replace the local implementation by changing the
wiring in ``musicboard/main.py`` alone.  Unit tests inject mocks of the
same interfaces.

CONCRETE PROVIDER MAP:
    Interface             ->  Concrete implementations (in musicboard/providers/)
    ------------------------------------------------------------------------
    ILLMProvider          ->  OpenAILLMProvider, AnthropicLLMProvider
    ICacheProvider        ->  MemoryCacheProvider
    IRatingProvider       ->  SQLiteRatingProvider
    IBoardProvider        ->  SQLiteBoardProvider
    IListProvider         ->  SQLiteListProvider
    IListenLaterProvider  ->  SQLiteListenLaterProvider
    IProfileProvider      ->  SQLiteProfileProvider

The upstream music APIs (AudioDB, Spotify, Bandsintown, Discogs, Genius)
have no interface: each is a one-off translator with its own action set,
exposed by exactly one function endpoint.
"""

from musicboard.interfaces.board_provider import IBoardProvider
from musicboard.interfaces.cache_provider import ICacheProvider
from musicboard.interfaces.list_provider import IListProvider
from musicboard.interfaces.listen_later_provider import IListenLaterProvider
from musicboard.interfaces.llm_provider import ILLMProvider
from musicboard.interfaces.profile_provider import IProfileProvider
from musicboard.interfaces.rating_provider import IRatingProvider

__all__ = [
    "IBoardProvider",
    "ICacheProvider",
    "IListProvider",
    "IListenLaterProvider",
    "ILLMProvider",
    "IProfileProvider",
    "IRatingProvider",
]
