# dashboard/views/dashboard.py
import logging

from rest_framework.views import APIView

from core.permissions import IsAdminRole
from core.query import parse_positive_int
from core.responses import api_success
from dashboard.services.analytics import DEFAULT_PERIOD_DAYS, get_analytics
from dashboard.services.stats import get_dashboard_stats

logger = logging.getLogger("hub.dashboard")


class DashboardStatsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        stats = get_dashboard_stats()
        return api_success("Dashboard statistics retrieved successfully", stats)


class DashboardAnalyticsView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        period = parse_positive_int(request.query_params.get("period"), "period", DEFAULT_PERIOD_DAYS)
        data = get_analytics(period)
        logger.debug(f"Analytics computed for {data['period']} days")
        return api_success("Analytics data retrieved successfully", data)
