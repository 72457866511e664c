from django.urls import path
from .views import (
    EventListCreateView,
    EventDetailView,
    EventBySlugView,
    RegisterEventView,
)

urlpatterns = [
    path("", EventListCreateView.as_view(), name="event-list"),
    path("slug/<slug:slug>/", EventBySlugView.as_view(), name="event-by-slug"),
    path("<int:pk>/", EventDetailView.as_view(), name="event-detail"),
    path("<int:pk>/register/", RegisterEventView.as_view(), name="event-register"),
]
