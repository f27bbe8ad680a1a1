"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("api/column-types/", views.column_types_api, name="column_types_api"),
    path("api/dashboard/", views.dashboard_api, name="dashboard_api"),
]
