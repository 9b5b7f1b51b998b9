from .config import (
    DEFAULT_EXCLUDED_TAGS,
    MeterSettings,
    TagConfig,
    load_settings,
)

__all__ = [
    "DEFAULT_EXCLUDED_TAGS",
    "MeterSettings",
    "TagConfig",
    "load_settings",
]
