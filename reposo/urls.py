"""
URL configuration for the reposo project.

Certificate endpoints live under /api/certificados/; anything else that does
not match answers with the JSON 404 envelope.
"""
from django.urls import include, path, re_path

from core import views

urlpatterns = [
    path('api/certificados/', include('core.urls')),
    path('health', views.health, name='health'),
    re_path(r'^.*$', views.not_found),
]
