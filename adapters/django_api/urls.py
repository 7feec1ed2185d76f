"""
Crewdesk Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("business-logic", views.business_logic_view),
]
