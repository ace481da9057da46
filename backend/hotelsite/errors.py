from __future__ import annotations


class HotelSiteError(Exception):
    """Base class for errors raised by this application."""


class ConfigurationError(HotelSiteError):
    """Missing or unusable process configuration (fatal at startup)."""


class SessionCreationError(HotelSiteError):
    pass


class NotFoundError(HotelSiteError):
    def __init__(self, what: str):
        super().__init__(f"{what} not found")
        self.what = what
