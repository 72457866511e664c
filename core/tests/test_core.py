# core/tests/test_core.py
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APIClient

from core.exceptions import custom_exception_handler
from core.query import Page, parse_bool, parse_date_param, parse_positive_int
from core.sanitizers import (
    ValidationError as SanitizationError,
    sanitize_content,
    sanitize_description,
    sanitize_tags,
    sanitize_title,
    validate_price,
    validate_url,
)


class PageTest(SimpleTestCase):
    def test_middle_page(self):
        page = Page(items=[], current_page=2, limit=10, total_count=25)
        self.assertEqual(
            page.pagination(),
            {"currentPage": 2, "totalPages": 3, "totalCount": 25, "hasNext": True, "hasPrev": True},
        )

    def test_empty_result(self):
        page = Page(items=[], current_page=1, limit=10, total_count=0)
        self.assertEqual(page.total_pages, 0)
        self.assertFalse(page.pagination()["hasNext"])
        self.assertFalse(page.pagination()["hasPrev"])


class ParamParsingTest(SimpleTestCase):
    def test_positive_int(self):
        self.assertEqual(parse_positive_int(None, "page", 1), 1)
        self.assertEqual(parse_positive_int("3", "page", 1), 3)
        for bad in ("0", "-2", "two"):
            with self.assertRaises(ValidationError):
                parse_positive_int(bad, "page", 1)

    def test_bool(self):
        self.assertTrue(parse_bool("true"))
        self.assertTrue(parse_bool("1"))
        self.assertFalse(parse_bool("false"))

    def test_bare_date_upper_bound_covers_day(self):
        upper = parse_date_param("2024-05-01", "dateTo", end_of_day=True)
        lower = parse_date_param("2024-05-01", "dateFrom")

        self.assertTrue(timezone.is_aware(upper))
        self.assertEqual(timezone.localtime(lower).hour, 0)
        self.assertEqual((timezone.localtime(upper).hour, timezone.localtime(upper).minute), (23, 59))

    def test_full_datetime_is_kept(self):
        parsed = parse_date_param("2024-05-01T10:30:00+00:00", "dateTo", end_of_day=True)
        self.assertEqual((parsed.hour, parsed.minute), (10, 30))

    def test_bad_date(self):
        for bad in ("yesterday", "2024-13-40"):
            with self.assertRaises(ValidationError):
                parse_date_param(bad, "dateFrom")


class SanitizerTest(SimpleTestCase):
    def test_title_is_single_line(self):
        self.assertEqual(sanitize_title("  Hello\r\n   world  "), "Hello world")

    def test_content_strips_scripts(self):
        cleaned = sanitize_content('<p onclick="x()">Hi</p><script>bad()</script>')
        self.assertNotIn("<script", cleaned)
        self.assertNotIn("onclick", cleaned)
        self.assertIn("<p>Hi</p>", cleaned)

    def test_description_is_html_cleaned_and_capped(self):
        cleaned = sanitize_description('<b onmouseover="x()">Join</b> us<script>steal()</script>')
        self.assertNotIn("<script", cleaned)
        self.assertNotIn("onmouseover", cleaned)
        self.assertTrue(cleaned.startswith("Join us"))
        self.assertEqual(len(sanitize_description("a" * 5000)), 2000)

    def test_tags(self):
        self.assertEqual(sanitize_tags([" git ", "git", "", "vcs"]), ["git", "vcs"])
        with self.assertRaises(SanitizationError):
            sanitize_tags("git,vcs")

    def test_price(self):
        self.assertEqual(validate_price("12.5"), Decimal("12.50"))
        with self.assertRaises(SanitizationError):
            validate_price("-1")

    def test_url(self):
        self.assertEqual(validate_url("https://forms.example.com/x"), "https://forms.example.com/x")
        self.assertIsNone(validate_url(""))
        with self.assertRaises(SanitizationError):
            validate_url("javascript:alert(1)")


class ExceptionHandlerTest(SimpleTestCase):
    def test_not_found_envelope(self):
        response = custom_exception_handler(NotFound("Event not found"), {})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["success"], False)
        self.assertEqual(response.data["message"], "Event not found")
        self.assertEqual(response.data["code"], "not_found")

    def test_field_errors(self):
        response = custom_exception_handler(ValidationError({"title": ["Title is required"]}), {})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "title: Title is required")
        self.assertEqual(response.data["errors"], {"title": ["Title is required"]})
        self.assertNotIn("code", response.data)

    @override_settings(DEBUG=False)
    def test_unhandled_exception_hides_detail(self):
        with self.assertLogs("hub.errors", level="ERROR"):
            response = custom_exception_handler(RuntimeError("db password is hunter2"), {})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["message"], "Internal server error.")
        self.assertNotIn("debug", response.data["errors"])


class HealthCheckTest(TestCase):
    def test_health(self):
        r = APIClient().get("/api/health/")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.data["db"])

    def test_api_requests_are_logged(self):
        with self.assertLogs("hub.requests", level="INFO") as logs:
            APIClient().get("/api/health/", REMOTE_ADDR="10.1.2.3")

        self.assertIn("GET /api/health/ -> 200 ip=10.1.2.3", logs.output[0])
