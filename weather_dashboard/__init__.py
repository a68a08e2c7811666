# ABOUTME: Weather dashboard backend package.
# ABOUTME: Proxies OpenWeatherMap weather and geocoding calls and reshapes them for the dashboard UI.

__version__ = "0.1.0"
