"""URL configuration for visualizations views."""

from __future__ import annotations

from django.urls import path

from visualizations import views

app_name = "visualizations"

urlpatterns = [
    path("", views.demo, name="demo"),
]
