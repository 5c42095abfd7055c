"""
Weather component processors.

Read the latest stored readings from ``weather_current`` and
``weather_daily_forecast``; nothing is fetched from a weather service at
render time.
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from tickerfeed.database.models import ItemField, WeatherCurrent
from tickerfeed.feed.models import ElementField
from tickerfeed.feed.processors.base import (
    BaseProcessor,
    ComponentType,
    FieldAugmentation,
    ProcessorContext,
    parse_json_value,
)
from tickerfeed.feed.schedule import get_zone
from tickerfeed.utils.text import fill_placeholders, round_half_up

logger = logging.getLogger(__name__)

CELSIUS = "°C"
MISSING = "N/A"

DAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# WMO weather interpretation codes
WEATHER_CODES = {
    0: "Clear",
    1: "Mainly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light Drizzle",
    53: "Drizzle",
    55: "Heavy Drizzle",
    61: "Light Rain",
    63: "Rain",
    65: "Heavy Rain",
    71: "Light Snow",
    73: "Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Light Showers",
    81: "Showers",
    82: "Heavy Showers",
    85: "Light Snow Showers",
    86: "Snow Showers",
    95: "Thunderstorm",
    96: "Thunderstorm with Hail",
    99: "Thunderstorm with Hail",
}


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def describe_conditions(reading: WeatherCurrent) -> str:
    """Summary text, else the WMO code description, else the icon name."""
    if reading.summary:
        return reading.summary
    if reading.weather_code is not None and reading.weather_code in WEATHER_CODES:
        return WEATHER_CODES[reading.weather_code]
    return reading.icon or MISSING


def _to_fahrenheit(
    value: Optional[float], unit: Optional[str], fahrenheit: Optional[float] = None
) -> Optional[float]:
    if fahrenheit is not None:
        return fahrenheit
    if value is None:
        return None
    if unit == CELSIUS:
        return celsius_to_fahrenheit(value)
    return value


def format_temperature(value: Optional[float]) -> str:
    """Whole degrees, or ``N/A`` when there is no reading."""
    if value is None:
        return MISSING
    return str(round_half_up(value))


class WeatherCitiesProcessor(BaseProcessor):
    """
    Current conditions for up to three cities.

    The field value is a JSON array of location IDs. Each city found fills one
    slot field (``01``, ``02``, ``03`` by default) using the component's
    format string; a city without a reading shows ``N/A``.
    """

    component_types = (ComponentType.WEATHER_CITIES, ComponentType.WEATHER_LOCATIONS)

    def process(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> FieldAugmentation:
        template_name = component.get("templateName") or None
        slot_names = [
            component.get("field1") or "01",
            component.get("field2") or "02",
            component.get("field3") or "03",
        ]
        format_string = component.get("format") or "{{name}} {{temperature}}°F"

        value = (item_field.value or "").strip()
        city_ids = parse_json_value(value, []) if value.startswith("[") else []
        if not isinstance(city_ids, list):
            city_ids = []
        if not city_ids:
            logger.debug(f"Weather cities field {item_field.name} has no city IDs")
            return FieldAugmentation(template=template_name)

        max_cities = min(context.settings.max_weather_cities, len(slot_names))
        selected = [str(city_id) for city_id in city_ids[:max_cities]]

        try:
            locations = context.repository.get_weather_locations(selected)
        except Exception as e:
            logger.error(f"Error fetching weather locations {selected}: {e}")
            return FieldAugmentation(template=template_name)

        fields: list[ElementField] = []
        for index, city_id in enumerate(selected):
            location = locations.get(city_id)
            if location is None:
                logger.debug(f"Weather location {city_id} not found")
                continue

            try:
                reading = context.repository.get_latest_weather(city_id)
            except Exception as e:
                logger.error(f"Error fetching weather for {city_id}: {e}")
                reading = None

            temperature = None
            conditions = MISSING
            if reading is not None:
                temperature = _to_fahrenheit(reading.temperature_value, reading.temperature_unit)
                conditions = describe_conditions(reading)
            else:
                logger.debug(f"No weather reading for {city_id}")

            variables = {
                "name": location.display_name,
                "country": location.country or "",
                "admin1": location.admin1 or "",
                "temperature": format_temperature(temperature),
                "conditions": conditions,
            }
            fields.append(
                ElementField(name=slot_names[index], value=fill_placeholders(format_string, variables))
            )

        logger.debug(f"Weather cities returning {len(fields)} fields")
        return FieldAugmentation(fields=fields, template=template_name)


class WeatherForecastProcessor(BaseProcessor):
    """
    Multi-day forecast for one location, starting tomorrow.

    Emits ``DAY{i}``, ``HI{i}`` and ``LO{i}`` (prefixes configurable) for
    each forecast day, counting from 0.
    """

    component_types = (ComponentType.WEATHER_FORECAST,)

    def process(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> FieldAugmentation:
        template_name = component.get("templateName") or None
        day_prefix = component.get("dayPrefix") or "DAY"
        high_prefix = component.get("highPrefix") or "HI"
        low_prefix = component.get("lowPrefix") or "LO"
        try:
            num_days = int(component.get("numDays") or context.settings.forecast_days)
        except (TypeError, ValueError):
            num_days = context.settings.forecast_days

        location_id = (item_field.value or "").strip()
        if not location_id:
            return FieldAugmentation(template=template_name)

        local_today = context.render.now.astimezone(get_zone(context.render.timezone)).date()
        tomorrow = local_today + timedelta(days=1)

        try:
            location = context.repository.get_weather_location(location_id)
            if location is None:
                logger.debug(f"Forecast location {location_id} not found")
                return FieldAugmentation(template=template_name)
            forecasts = context.repository.get_daily_forecasts(location_id, tomorrow, num_days)
        except Exception as e:
            logger.error(f"Error fetching forecast for {location_id}: {e}")
            return FieldAugmentation(template=template_name)

        fields: list[ElementField] = []
        for index, forecast in enumerate(forecasts[:num_days]):
            high = _to_fahrenheit(forecast.temp_max_value, forecast.temp_max_unit, forecast.temp_max_f)
            low = _to_fahrenheit(forecast.temp_min_value, forecast.temp_min_unit, forecast.temp_min_f)
            fields.extend(
                [
                    ElementField(
                        name=f"{day_prefix}{index}",
                        value=DAY_ABBREVIATIONS[forecast.forecast_date.weekday()],
                    ),
                    ElementField(name=f"{high_prefix}{index}", value=format_temperature(high)),
                    ElementField(name=f"{low_prefix}{index}", value=format_temperature(low)),
                ]
            )

        logger.debug(f"Weather forecast for {location.display_name} returning {len(fields)} fields")
        return FieldAugmentation(fields=fields, template=template_name)
