"""Management command to fetch weather using the same client as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from backend.api.views import _serialize_weather, get_weather_client
from backend.core.providers.base import OpenWeatherError, ProviderError


class Command(BaseCommand):
    help = "Fetch current weather by coordinates or by city and country code"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--lat", type=float, help="Latitude")
        parser.add_argument("--lon", type=float, help="Longitude")
        parser.add_argument("--city", type=str, help="City name")
        parser.add_argument("--country", type=str, help="ISO 3166 country code")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        city = options.get("city")
        country = options.get("country")
        latitude = options.get("lat")
        longitude = options.get("lon")

        client = get_weather_client()
        try:
            if city:
                if not country:
                    raise CommandError("--country is required with --city")
                weather = client.get_by_city_and_country(city, country)
            else:
                if latitude is None or longitude is None:
                    raise CommandError("--lat and --lon are required unless using --city")
                weather = client.get_by_coordinates(latitude, longitude)
        except ProviderError as exc:
            raise CommandError(f"Provider returned {exc.status_code}: {exc.body}") from exc
        except OpenWeatherError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(json.dumps(_serialize_weather(weather)))
