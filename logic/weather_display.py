"""Condition symbol to emoji mapping and the one-line weather summary."""

from __future__ import annotations

from tools.weather_provider import WeatherReport

THERMOMETER = "🌡️"


def weather_emoji(symbol: str | None) -> str:
    """Keyword-substring rules, checked in order; anything unmatched is a thermometer."""

    name = (symbol or "").lower()
    if "cloud.sun" in name:
        return "⛅"
    if "sun" in name and "cloud" not in name:
        return "☀️"
    if "cloud.rain" in name or "cloud.drizzle" in name:
        return "🌧️"
    if "cloud.snow" in name:
        return "❄️"
    if "cloud.bolt" in name:
        return "⛈️"
    if "cloud" in name:
        return "☁️"
    return THERMOMETER


def weather_summary(report: WeatherReport) -> str:
    return (
        f"{weather_emoji(report.condition_symbol)} "
        f"High {round(report.high_temp):d}°  Low {round(report.low_temp):d}°"
    )


__all__ = ["weather_emoji", "weather_summary", "THERMOMETER"]
