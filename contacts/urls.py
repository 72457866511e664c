from django.urls import path
from .views import (
    ContactListCreateView,
    ContactDetailView,
    ContactRespondView,
    ContactStatusView,
)

urlpatterns = [
    path("", ContactListCreateView.as_view(), name="contact-list"),
    path("<int:pk>/", ContactDetailView.as_view(), name="contact-detail"),
    path("<int:pk>/respond/", ContactRespondView.as_view(), name="contact-respond"),
    path("<int:pk>/status/", ContactStatusView.as_view(), name="contact-status"),
]
