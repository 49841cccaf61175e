"""Concert listing providers."""

from musicboard.providers.events.bandsintown_provider import BandsintownProvider

__all__ = ["BandsintownProvider"]
