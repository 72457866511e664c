from .dashboard import DashboardStatsView, DashboardAnalyticsView
