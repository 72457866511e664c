import logging

from django.db import transaction
from rest_framework.exceptions import NotFound
from rest_framework.views import APIView

from core.assets import AssetKind, delete_asset_on_commit, store_image, store_optional_image
from core.permissions import IsStaffOrReadOnly
from core.query import (
    apply_date_range,
    apply_exact_filters,
    choice_of,
    paginate,
    parse_flag,
    parse_id,
    search_filter,
)
from core.responses import api_created, api_error, api_success
from events.lifecycle import complete_past_events, load_event
from events.models import Event
from events.serializers import EventSerializer

logger = logging.getLogger("hub.events")

EVENT_FILTERS = {
    "status": ("status", choice_of(Event.STATUS_CHOICES)),
    "type": ("event_type", choice_of(Event.TYPE_CHOICES)),
    "category": ("category", choice_of(Event.CATEGORY_CHOICES)),
    "featured": ("featured", parse_flag),
    "author": ("author_id", parse_id),
}

EVENT_SEARCH_FIELDS = ("title", "description", "location", "tags")


def get_event_or_404(**lookup) -> Event:
    try:
        return load_event(**lookup)
    except (Event.DoesNotExist, ValueError):
        raise NotFound("Event not found")


class EventListCreateView(APIView):
    """
    GET  /api/events/  public, filtered + paginated
    POST /api/events/  staff, multipart with a required `image` file
    """
    permission_classes = [IsStaffOrReadOnly]

    def get(self, request):
        params = request.query_params

        # Persist auto-completion before filtering on status.
        complete_past_events()

        qs = Event.objects.select_related("author")
        qs = apply_exact_filters(qs, params, EVENT_FILTERS)
        qs = qs.filter(search_filter(params.get("search"), EVENT_SEARCH_FIELDS))
        qs = apply_date_range(qs, params, "date")
        qs = qs.order_by("date", "-created_at")

        page = paginate(qs, params, default_limit=10)
        serializer = EventSerializer(page.items, many=True, context={"request": request})

        return api_success(
            "Events retrieved successfully",
            serializer.data,
            pagination=page.pagination(),
        )

    def post(self, request):
        upload = request.FILES.get("image")
        if upload is None:
            return api_error("Event image is required")

        # The file is written first; leaving the block without commit() removes it.
        with store_image(upload, AssetKind.EVENTS) as pending:
            serializer = EventSerializer(data=request.data, context={"request": request})
            serializer.is_valid(raise_exception=True)
            with transaction.atomic():
                event = serializer.save(author=request.user, image=pending.name)
            pending.commit()

        logger.info(f"Event {event.pk} created by user {request.user.pk}: {event.slug}")
        return api_created(
            "Event created successfully",
            EventSerializer(event, context={"request": request}).data,
        )


class EventDetailView(APIView):
    """
    GET          /api/events/<id>/  public
    PUT / PATCH  /api/events/<id>/  staff, optional replacement `image`
    DELETE       /api/events/<id>/  staff, removes the stored image
    """
    permission_classes = [IsStaffOrReadOnly]

    def get(self, request, pk):
        event = get_event_or_404(pk=pk)
        serializer = EventSerializer(event, context={"request": request})
        return api_success("Event retrieved successfully", serializer.data)

    def put(self, request, pk):
        event = get_event_or_404(pk=pk)
        old_image = event.image

        with store_optional_image(request.FILES.get("image"), AssetKind.EVENTS) as pending:
            serializer = EventSerializer(
                event, data=request.data, partial=True, context={"request": request}
            )
            serializer.is_valid(raise_exception=True)

            changes = {"image": pending.name} if pending.name else {}
            with transaction.atomic():
                event = serializer.save(**changes)
            pending.commit()

        if pending.name and old_image != pending.name:
            delete_asset_on_commit(old_image)

        logger.info(f"Event {event.pk} updated by user {request.user.pk}")
        return api_success(
            "Event updated successfully",
            EventSerializer(event, context={"request": request}).data,
        )

    patch = put

    def delete(self, request, pk):
        event = get_event_or_404(pk=pk)
        event_id = event.pk
        event.delete()
        logger.info(f"Event {event_id} deleted by user {request.user.pk}")
        return api_success("Event deleted successfully")


class EventBySlugView(APIView):
    permission_classes = [IsStaffOrReadOnly]

    def get(self, request, slug):
        event = get_event_or_404(slug=slug)
        serializer = EventSerializer(event, context={"request": request})
        return api_success("Event retrieved successfully", serializer.data)
