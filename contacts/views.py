import logging

from django.db.models import Count
from django.utils import timezone
from rest_framework.exceptions import NotFound, Throttled
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.middleware import client_ip
from core.permissions import IsAdminRole
from core.query import apply_date_range, apply_exact_filters, choice_of, paginate, search_filter
from core.responses import api_created, api_success
from core.throttles import ContactSubmitThrottle
from .models import Contact
from .serializers import (
    ContactResponseSerializer,
    ContactSerializer,
    ContactStatusSerializer,
    ContactSubmitSerializer,
)
from .tasks import send_contact_notification_task, send_contact_response_task

logger = logging.getLogger("hub.contacts")

CONTACT_FILTERS = {
    "status": ("status", choice_of(Contact.STATUS_CHOICES)),
    "category": ("category", choice_of(Contact.CATEGORY_CHOICES)),
    "priority": ("priority", choice_of(Contact.PRIORITY_CHOICES)),
}

CONTACT_SEARCH_FIELDS = ("name", "email", "subject", "message")


def get_contact_or_404(pk) -> Contact:
    try:
        return Contact.objects.select_related("responded_by").get(pk=pk)
    except Contact.DoesNotExist:
        raise NotFound("Contact submission not found")


def enqueue(task, *args):
    """
    Emails are best effort: a broker outage must not fail the request.
    """
    try:
        task.delay(*args)
    except Exception as e:
        logger.warning(f"Could not queue {task.name}{args}: {e}")


class ContactListCreateView(APIView):
    """
    POST /api/contact/  public contact form, rate limited per client IP
    GET  /api/contact/  admin list with per-status counts
    """
    throttle_classes = [ContactSubmitThrottle]

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAdminRole()]

    def get_authenticators(self):
        if self.request.method == "POST":
            return []
        return super().get_authenticators()

    def throttled(self, request, wait):
        raise Throttled(
            wait=wait,
            detail="Too many contact form submissions, please try again later.",
        )

    def post(self, request):
        serializer = ContactSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        contact = serializer.save(
            ip_address=client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", "")[:512],
        )
        logger.info(f"Contact form submitted: id={contact.pk}, email={contact.email}")

        enqueue(send_contact_notification_task, contact.pk)

        return api_created(
            "Contact form submitted successfully. We will get back to you soon!",
            {
                "id": contact.pk,
                "name": contact.name,
                "email": contact.email,
                "subject": contact.subject,
                "submittedAt": contact.created_at,
            },
        )

    def get(self, request):
        params = request.query_params

        qs = Contact.objects.select_related("responded_by")
        qs = apply_exact_filters(qs, params, CONTACT_FILTERS)
        qs = qs.filter(search_filter(params.get("search"), CONTACT_SEARCH_FIELDS))
        qs = apply_date_range(qs, params, "created_at")
        qs = qs.order_by("-created_at")

        page = paginate(qs, params, default_limit=20)
        serializer = ContactSerializer(page.items, many=True)

        # Counts cover every submission, not just the filtered page.
        status_counts = {
            row["status"]: row["count"]
            for row in Contact.objects.order_by().values("status").annotate(count=Count("id"))
        }

        return api_success(
            "Contacts retrieved successfully",
            serializer.data,
            pagination=page.pagination(),
            statusCounts=status_counts,
        )


class ContactDetailView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, pk):
        contact = get_contact_or_404(pk)

        if contact.status == Contact.STATUS_NEW:
            contact.status = Contact.STATUS_READ
            contact.save(update_fields=["status", "updated_at"])

        return api_success("Contact retrieved successfully", ContactSerializer(contact).data)

    def delete(self, request, pk):
        contact = get_contact_or_404(pk)
        contact.delete()
        logger.info(f"Contact {pk} deleted by user {request.user.pk}")
        return api_success("Contact submission deleted successfully")


class ContactRespondView(APIView):
    permission_classes = [IsAdminRole]

    def put(self, request, pk):
        serializer = ContactResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        contact = get_contact_or_404(pk)
        contact.response_message = serializer.validated_data["message"]
        contact.responded_by = request.user
        contact.responded_at = timezone.now()
        contact.status = Contact.STATUS_REPLIED
        contact.save()

        logger.info(f"Contact {contact.pk} answered by user {request.user.pk}")
        enqueue(send_contact_response_task, contact.pk)

        return api_success("Response sent successfully", ContactSerializer(contact).data)

    post = put


class ContactStatusView(APIView):
    permission_classes = [IsAdminRole]

    def patch(self, request, pk):
        contact = get_contact_or_404(pk)

        serializer = ContactStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        for field, value in serializer.validated_data.items():
            setattr(contact, field, value)
        contact.save(update_fields=[*serializer.validated_data, "updated_at"])

        logger.info(f"Contact {contact.pk} updated: {dict(serializer.validated_data)}")
        return api_success("Contact updated successfully", ContactSerializer(contact).data)

    put = patch
