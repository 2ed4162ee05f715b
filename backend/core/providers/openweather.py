"""OpenWeatherMap current weather client."""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import requests

from backend.core.abstractions import CurrentWeatherRetriever, Weather
from backend.core.providers.base import DecodeError, ProviderError, TransportError


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://api.openweathermap.org/data/2.5"
UNREADABLE_BODY = "<response body unavailable>"


class OpenWeatherClient(CurrentWeatherRetriever):
    """Facade over the OpenWeatherMap ``/weather`` endpoint.

    Both lookups share one pipeline: build the URL, ``GET`` it, reject any
    status other than exactly 200, then decode the body into :class:`Weather`.
    Note that 201/204 are rejected as well; callers relying on the provider
    only ever returning 200 on success should keep that in mind.

    Example::

        client = OpenWeatherClient(api_key="...")
        client.get_by_coordinates(40.4, -3.7)
        client.get_by_city_and_country("Madrid", "ES")
    """

    name = "openweather"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def get_by_coordinates(self, latitude: float, longitude: float) -> Weather:
        """Return current weather at decimal ``latitude``/``longitude``.

        Values are not range checked; the provider's answer decides.
        """
        url = self._weather_url(lat=f"{latitude:f}", lon=f"{longitude:f}")
        return self._request(url)

    def get_by_city_and_country(self, city: str, country_code: str) -> Weather:
        """Return current weather for ``city`` in the ISO ``country_code``."""
        url = self._weather_url(q=f"{_encode(city)},{_encode(country_code)}")
        return self._request(url)

    # helpers ------------------------------------------------------------
    def _weather_url(self, **query: str) -> str:
        # Joined by hand: ``params=`` would encode the comma in ``q=city,CC`` as %2C.
        logger.debug("OpenWeather query %s", query)
        query["APPID"] = _encode(self.api_key)
        pairs = "&".join(f"{key}={value}" for key, value in query.items())
        return f"{self.base_url}/weather?{pairs}"

    def _request(self, url: str) -> Weather:
        try:
            response = self.session.get(
                url,
                headers={"Content-Type": "application/json"},
                stream=True,
            )
        except requests.RequestException as exc:
            logger.error("OpenWeather request failed", exc_info=exc)
            raise TransportError(f"request to {self.base_url} failed: {exc}") from exc

        try:
            if response.status_code != 200:
                body = self._read_text(response)
                logger.error("OpenWeather returned %s: %s", response.status_code, body)
                raise ProviderError(response.status_code, body)
            return self._parse(response)
        finally:
            response.close()

    def _read_text(self, response: requests.Response) -> str:
        try:
            return response.text
        except requests.RequestException as exc:
            logger.warning("Could not read error body", exc_info=exc)
            return UNREADABLE_BODY

    def _parse(self, response: requests.Response) -> Weather:
        try:
            payload = response.json(parse_constant=_reject_constant)
        # requests' JSONDecodeError is also a RequestException
        except ValueError as exc:
            logger.error("Failed to decode JSON", exc_info=exc)
            raise DecodeError(f"invalid json: {exc}") from exc
        except requests.RequestException as exc:
            logger.error("Reading OpenWeather response failed", exc_info=exc)
            raise TransportError(f"reading response failed: {exc}") from exc
        try:
            return Weather.from_payload(payload)
        except (TypeError, ValueError) as exc:
            logger.error("Unexpected weather payload", exc_info=exc)
            raise DecodeError(f"unexpected payload: {exc}") from exc


def _encode(value: str) -> str:
    return quote(value, safe="")


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


__all__ = ["OpenWeatherClient", "DEFAULT_BASE_URL"]
