from django.urls import path
from .views import DashboardStatsView, DashboardAnalyticsView

urlpatterns = [
    path("stats/", DashboardStatsView.as_view(), name="dashboard-stats"),
    path("analytics/", DashboardAnalyticsView.as_view(), name="dashboard-analytics"),
]
