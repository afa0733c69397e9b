from django.urls import path, re_path
from . import views

urlpatterns = [
    path('generate', views.certificate_generate, name='certificate-generate'),
    path('telegram', views.certificate_telegram, name='certificate-telegram'),
    path('preview', views.certificate_preview, name='certificate-preview'),
    path('validate', views.certificate_validate, name='certificate-validate'),
    path('health', views.certificate_health, name='certificate-health'),
    re_path(r'^.*$', views.not_found),
]
