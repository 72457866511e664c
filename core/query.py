"""
Query helpers shared by the list endpoints.

Every list endpoint accepts the same small set of query parameters:
exact-match filters, a free-text `search` OR'd across a fixed field set,
an inclusive `dateFrom`/`dateTo` range and 1-indexed `page`/`limit`
pagination. The pagination block is computed from a separate count over
the same filter, never from the page itself.
"""
import math
from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, Optional

from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.exceptions import ValidationError

MAX_PAGE_SIZE = 100

TRUE_VALUES = ("1", "true", "yes")


@dataclass
class Page:
    items: list
    current_page: int
    limit: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.limit else 0

    def pagination(self) -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalCount": self.total_count,
            "hasNext": self.current_page < self.total_pages,
            "hasPrev": self.current_page > 1,
        }


def parse_positive_int(value, name: str, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: f"{name} must be a positive integer"})
    if number < 1:
        raise ValidationError({name: f"{name} must be a positive integer"})
    return number


def parse_bool(value) -> bool:
    return str(value).strip().lower() in TRUE_VALUES


def parse_date_param(value: Optional[str], name: str, end_of_day: bool = False) -> Optional[datetime]:
    """
    Accepts a date (YYYY-MM-DD) or a full ISO datetime.
    A bare date used as an upper bound covers that whole day.
    """
    if not value:
        return None

    try:
        day = parse_date(value)
        parsed = None if day else parse_datetime(value)
    except ValueError:
        day = parsed = None

    if day is not None:
        parsed = datetime.combine(day, time.max if end_of_day else time.min)
    elif parsed is None:
        raise ValidationError({name: f"{name} must be an ISO date"})

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def search_filter(term: Optional[str], fields: Iterable[str]) -> Q:
    """
    Case-insensitive substring match OR'd across `fields`.
    """
    query = Q()
    if not term:
        return query
    for field in fields:
        query |= Q(**{f"{field}__icontains": term})
    return query


def parse_id(value, name: str) -> int:
    return parse_positive_int(value, name, None)


def parse_flag(value, name: str) -> bool:
    return parse_bool(value)


def choice_of(choices):
    """
    Parser accepting only the stored values of a model `choices` list.
    """
    allowed = {key for key, _label in choices}

    def parse(value, name: str) -> str:
        if value not in allowed:
            raise ValidationError({name: f"Invalid {name}"})
        return value

    return parse


def apply_exact_filters(qs: QuerySet, params, mapping: dict) -> QuerySet:
    """
    mapping: query-param name -> model lookup, or (lookup, parser).
    A parser is called as parser(value, param) and raises ValidationError.
    """
    for param, lookup in mapping.items():
        value = params.get(param)
        if value in (None, ""):
            continue
        if isinstance(lookup, tuple):
            lookup, parser = lookup
            value = parser(value, param)
        qs = qs.filter(**{lookup: value})
    return qs


def apply_date_range(qs: QuerySet, params, field: str) -> QuerySet:
    date_from = parse_date_param(params.get("dateFrom"), "dateFrom")
    date_to = parse_date_param(params.get("dateTo"), "dateTo", end_of_day=True)
    if date_from:
        qs = qs.filter(**{f"{field}__gte": date_from})
    if date_to:
        qs = qs.filter(**{f"{field}__lte": date_to})
    return qs


def paginate(qs: QuerySet, params, default_limit: int = 10) -> Page:
    page = parse_positive_int(params.get("page"), "page", 1)
    limit = min(parse_positive_int(params.get("limit"), "limit", default_limit), MAX_PAGE_SIZE)

    total_count = qs.count()
    skip = (page - 1) * limit
    items = list(qs[skip: skip + limit])

    return Page(items=items, current_page=page, limit=limit, total_count=total_count)
