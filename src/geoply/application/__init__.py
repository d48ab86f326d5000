"""Application layer - catalog loading, settings, widget binding and sessions.

ConfiguratorSession lives in ``geoply.application.session``; it is not
re-exported here because it depends on the infrastructure layer.
"""

from .binding import WidgetBinder
from .catalog import LoadError, load_catalog, load_catalog_from_dict, load_catalog_with_fallback
from .settings import EngineSettings, SettingsError, load_settings

__all__ = [
    "EngineSettings",
    "LoadError",
    "SettingsError",
    "WidgetBinder",
    "load_catalog",
    "load_catalog_from_dict",
    "load_catalog_with_fallback",
    "load_settings",
]
