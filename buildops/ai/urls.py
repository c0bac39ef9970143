from django.urls import path
from .views import iso_compliance

urlpatterns = [
    path('iso-compliance/', iso_compliance, name='iso-compliance'),
]
