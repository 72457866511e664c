from .events import (
    EventListCreateView,
    EventDetailView,
    EventBySlugView,
)
from .registrations import RegisterEventView
