"""
URL configuration for the backend.
"""

from django.contrib import admin
from django.urls import path

from .api import api

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", api.urls),
]

handler404 = "apps.core.views.route_not_found"
