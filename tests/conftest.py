from __future__ import annotations

import pytest

from backend.api.views import get_weather_client
from backend.core.providers.openweather import OpenWeatherClient


BASE_URL = "http://owm.test/data/2.5"
WEATHER_URL = f"{BASE_URL}/weather"


@pytest.fixture
def madrid_payload() -> dict:
    return {
        "coord": {"lon": -3.7, "lat": 40.4},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "main": {"temp": 293.15, "pressure": 1013, "humidity": 50, "temp_min": 290, "temp_max": 296},
        "wind": {"speed": 3.1, "deg": 200},
        "clouds": {"all": 0},
        "dt": 1600000000,
        "sys": {"type": 1, "id": 1, "country": "ES", "sunrise": 1599980000, "sunset": 1600020000},
        "id": 3117735,
        "name": "Madrid",
        "cod": 200,
    }


@pytest.fixture
def client() -> OpenWeatherClient:
    return OpenWeatherClient(api_key="test-key", base_url=BASE_URL)


@pytest.fixture
def fresh_weather_client():
    get_weather_client.cache_clear()
    yield
    get_weather_client.cache_clear()
