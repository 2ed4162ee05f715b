"""Errors raised by the OpenWeatherMap client."""
from __future__ import annotations


class OpenWeatherError(RuntimeError):
    """Base error for every failed weather query."""


class TransportError(OpenWeatherError):
    """The request never produced a response (DNS, connection, timeout)."""


class ProviderError(OpenWeatherError):
    """The provider answered with a status other than 200."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Status code was {status_code}, aborting. Error message was: {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(OpenWeatherError):
    """The response body was not JSON or did not match the weather schema."""


__all__ = ["OpenWeatherError", "TransportError", "ProviderError", "DecodeError"]
