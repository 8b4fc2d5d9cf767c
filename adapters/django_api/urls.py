"""
POS Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("access/check", views.access_check_view),
    path("access/location", views.location_check_view),
]
