"""URL configuration for gvisSite."""

from __future__ import annotations

from django.urls import include, path

urlpatterns = [
    path("", include("visualizations.urls")),
]
