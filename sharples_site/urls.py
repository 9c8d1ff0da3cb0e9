"""
URL configuration for the Sharples menu site.
"""
from django.urls import include, path

urlpatterns = [
    path('', include('menu.urls')),
]
