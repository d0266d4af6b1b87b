"""Settings access for the visualizations app.

All settings are optional:

- `GVIS_API_URL`: loader location without a scheme.
- `GVIS_API_VERSION`: library version passed to `google.load`.
- `GVIS_DEBUG`: force debug placeholders on or off; `None` defers to the
  `DEBUG` environment variable and `settings.DEBUG`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_API_URL: Final[str] = "www.google.com/jsapi"
DEFAULT_API_VERSION: Final[str] = "1"


@dataclass(frozen=True, slots=True)
class GvisSettings:
    """Resolved visualizations settings."""

    api_url: str
    api_version: str
    debug: bool | None


def get_gvis_settings() -> GvisSettings:
    """Read visualizations settings from Django settings.

    Raises:
        ImproperlyConfigured: When `GVIS_DEBUG` is set to a non-boolean value.
    """

    debug = getattr(settings, "GVIS_DEBUG", None)
    if debug is not None and not isinstance(debug, bool):
        raise ImproperlyConfigured(f"GVIS_DEBUG must be a bool or None, got {debug!r}.")
    return GvisSettings(
        api_url=str(getattr(settings, "GVIS_API_URL", DEFAULT_API_URL)).strip("/"),
        api_version=str(getattr(settings, "GVIS_API_VERSION", DEFAULT_API_VERSION)),
        debug=debug,
    )
