"""Core abstractions for the weather domain."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Protocol, Tuple

UINT32_MAX = 2**32 - 1


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True, slots=True)
class Condition:
    """One weather condition reported for the location (e.g. ``Clear``)."""

    id: int = 0
    main: str = ""
    description: str = ""
    icon: str = ""


@dataclass(frozen=True, slots=True)
class Measurements:
    temperature: float = 0.0
    pressure: float = 0.0
    humidity: float = 0.0
    temperature_min: float = 0.0
    temperature_max: float = 0.0


@dataclass(frozen=True, slots=True)
class Wind:
    speed: float = 0.0
    direction: float = 0.0


@dataclass(frozen=True, slots=True)
class Precipitation:
    three_hours: float = 0.0


@dataclass(frozen=True, slots=True)
class LocationMeta:
    type: int = 0
    id: int = 0
    message: float = 0.0
    country: str = ""
    sunrise: int = 0
    sunset: int = 0


@dataclass(frozen=True, slots=True)
class Weather:
    """Current conditions for one location at one instant.

    Field names follow Python conventions; :meth:`from_payload` maps them from
    the OpenWeatherMap JSON schema:

    - ``coord`` -> ``coordinates``
    - ``weather[]`` -> ``conditions``
    - ``main`` -> ``measurements``
    - ``clouds.all`` -> ``cloudiness``
    - ``rain.3h`` -> ``precipitation.three_hours``
    - ``dt`` -> ``observed_at`` (Unix seconds)
    - ``sys`` -> ``location_meta``
    - ``id`` / ``name`` / ``cod`` -> ``location_id`` / ``location_name`` / ``response_code``
    """

    coordinates: Coordinates = field(default_factory=Coordinates)
    conditions: Tuple[Condition, ...] = ()
    base: str = ""
    measurements: Measurements = field(default_factory=Measurements)
    wind: Wind = field(default_factory=Wind)
    cloudiness: int = 0
    precipitation: Precipitation = field(default_factory=Precipitation)
    observed_at: int = 0
    location_meta: LocationMeta = field(default_factory=LocationMeta)
    location_id: int = 0
    location_name: str = ""
    response_code: int = 0

    @property
    def observed_at_utc(self) -> datetime:
        return datetime.fromtimestamp(self.observed_at, tz=timezone.utc)

    @property
    def condition(self) -> Optional[Condition]:
        """Primary condition, if the provider reported any."""
        return self.conditions[0] if self.conditions else None

    @classmethod
    def from_payload(cls, payload: Any) -> "Weather":
        """Build a snapshot from a decoded JSON document.

        Missing or ``null`` values fall back to zero values. Values of the
        wrong JSON type raise :class:`TypeError` or :class:`ValueError`.
        """
        if not isinstance(payload, Mapping):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")

        coord = _section(payload, "coord")
        main = _section(payload, "main")
        wind = _section(payload, "wind")
        clouds = _section(payload, "clouds")
        rain = _section(payload, "rain")
        sys_ = _section(payload, "sys")

        observed_at = _integer(payload, "dt")
        if not 0 <= observed_at <= UINT32_MAX:
            raise ValueError(f"dt out of range: {observed_at}")

        return cls(
            coordinates=Coordinates(
                latitude=_number(coord, "lat"),
                longitude=_number(coord, "lon"),
            ),
            conditions=tuple(_condition(item) for item in _items(payload, "weather")),
            base=_text(payload, "base"),
            measurements=Measurements(
                temperature=_number(main, "temp"),
                pressure=_number(main, "pressure"),
                humidity=_number(main, "humidity"),
                temperature_min=_number(main, "temp_min"),
                temperature_max=_number(main, "temp_max"),
            ),
            wind=Wind(speed=_number(wind, "speed"), direction=_number(wind, "deg")),
            cloudiness=_integer(clouds, "all"),
            precipitation=Precipitation(three_hours=_number(rain, "3h")),
            observed_at=observed_at,
            location_meta=LocationMeta(
                type=_integer(sys_, "type"),
                id=_integer(sys_, "id"),
                message=_number(sys_, "message"),
                country=_text(sys_, "country"),
                sunrise=_integer(sys_, "sunrise"),
                sunset=_integer(sys_, "sunset"),
            ),
            location_id=_integer(payload, "id"),
            location_name=_text(payload, "name"),
            response_code=_integer(payload, "cod"),
        )


class CurrentWeatherRetriever(Protocol):
    """Anything that can look up current weather by coordinates or by city."""

    def get_by_coordinates(self, latitude: float, longitude: float) -> Weather:
        ...

    def get_by_city_and_country(self, city: str, country_code: str) -> Weather:
        ...


def _section(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"{key}: expected an object, got {type(value).__name__}")
    return value


def _items(payload: Mapping[str, Any], key: str) -> list:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{key}: expected an array, got {type(value).__name__}")
    return value


def _condition(item: Any) -> Condition:
    if not isinstance(item, Mapping):
        raise TypeError(f"weather: expected an object, got {type(item).__name__}")
    return Condition(
        id=_integer(item, "id"),
        main=_text(item, "main"),
        description=_text(item, "description"),
        icon=_text(item, "icon"),
    )


def _number(payload: Mapping[str, Any], key: str) -> float:
    value = payload.get(key)
    if value is None:
        return 0.0
    # bool is an int subclass but never a valid JSON number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key}: expected a number, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError(f"{key}: number out of range") from exc
    if not math.isfinite(number):
        raise ValueError(f"{key}: expected a finite number, got {value!r}")
    return number


def _integer(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key}: expected an integer, got {type(value).__name__}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{key}: expected an integer, got {value!r}")
        return int(value)
    return value


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key}: expected a string, got {type(value).__name__}")
    return value


__all__ = [
    "Condition",
    "Coordinates",
    "CurrentWeatherRetriever",
    "LocationMeta",
    "Measurements",
    "Precipitation",
    "Weather",
    "Wind",
]
