"""REST API views for weather information."""
from __future__ import annotations

from dataclasses import asdict
from functools import lru_cache

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.core.abstractions import Weather
from backend.core.providers.base import DecodeError, ProviderError, TransportError
from backend.core.providers.openweather import OpenWeatherClient


@lru_cache(maxsize=1)
def get_weather_client() -> OpenWeatherClient:
    return OpenWeatherClient(
        api_key=settings.OPENWEATHER_API_KEY,
        base_url=settings.OPENWEATHER_BASE_URL,
    )


def _serialize_weather(weather: Weather) -> dict:
    payload = asdict(weather)
    payload["observed_at_utc"] = (
        weather.observed_at_utc.astimezone(settings.DEFAULT_TIMEZONE).isoformat().replace("+00:00", "Z")
    )
    return payload


class WeatherView(APIView):
    """Current weather by ``lat``/``lon`` or by ``city``/``country``."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        """Return the weather snapshot for the requested location."""
        params = request.query_params
        city = params.get("city")
        client = get_weather_client()
        try:
            if city:
                country = params.get("country")
                if not country:
                    return Response({"detail": "country is required with city"}, status=status.HTTP_400_BAD_REQUEST)
                weather = client.get_by_city_and_country(city, country)
            else:
                try:
                    latitude = float(params["lat"])
                    longitude = float(params["lon"])
                except KeyError:
                    return Response(
                        {"detail": "lat and lon (or city and country) query parameters are required"},
                        status=status.HTTP_400_BAD_REQUEST,
                    )
                except ValueError:
                    return Response(
                        {"detail": "lat and lon must be valid floating point numbers"},
                        status=status.HTTP_400_BAD_REQUEST,
                    )
                weather = client.get_by_coordinates(latitude, longitude)
        except ProviderError as exc:
            return Response(
                {"detail": "weather provider rejected the request", "status_code": exc.status_code, "body": exc.body},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        except DecodeError:
            return Response({"detail": "weather provider returned an unexpected payload"}, status=status.HTTP_502_BAD_GATEWAY)
        except TransportError:
            return Response({"detail": "weather provider is unreachable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(_serialize_weather(weather), status=status.HTTP_200_OK)
