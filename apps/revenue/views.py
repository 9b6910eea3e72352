"""Admin API for revenue figures and the dashboard overview."""

from __future__ import annotations

import logging

from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin

from . import services
from .serializers import (
    MonthlyRevenueSerializer,
    ProjectionQuerySerializer,
    RevenueMonthSerializer,
    RevenueRangeSerializer,
)

logger = logging.getLogger(__name__)


class DashboardView(APIView):
    """GET /api/admin/dashboard/"""

    permission_classes = [IsPlatformAdmin]

    def get(self, request):  # type: ignore
        return Response({"success": True, "overview": services.dashboard_overview()}, status=status.HTTP_200_OK)


class RevenueViewSet(viewsets.ViewSet):
    """
    Einnahmenübersicht.

    Endpoints:
    - GET  /api/admin/revenue/?start=2026-01&end=2026-06 - gespeicherte Monate
    - POST /api/admin/revenue/calculate/ - Monat (neu) berechnen, Body: year, month
    - GET  /api/admin/revenue/projections/?months=6&include_trial=false - Prognose
    - GET  /api/admin/revenue/mietfaecher/?year=2026&month=3 - Einnahmen je Mietfach
    - GET  /api/admin/revenue/statistics/ - Summen über alle gespeicherten Monate
    """

    permission_classes = [IsPlatformAdmin]

    def list(self, request):  # type: ignore
        query = RevenueRangeSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        months = services.revenue_range(query.validated_data["start"], query.validated_data["end"])
        return Response(MonthlyRevenueSerializer(months, many=True).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"])
    def calculate(self, request):  # type: ignore
        serializer = RevenueMonthSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        revenue = services.calculate_monthly_revenue(
            serializer.validated_data["year"], serializer.validated_data["month"]
        )
        logger.info(f"Revenue for {revenue.monat:%Y-%m} recalculated by {request.user.email}")
        return Response(
            {"success": True, "revenue": MonthlyRevenueSerializer(revenue).data},
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"])
    def projections(self, request):  # type: ignore
        query = ProjectionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        projections = services.project_revenue(
            query.validated_data["months"],
            include_trial_revenue=query.validated_data["include_trial"],
        )
        return Response([projection.to_dict() for projection in projections], status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def mietfaecher(self, request):  # type: ignore
        query = RevenueMonthSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        summary = services.summarize_month(query.validated_data["year"], query.validated_data["month"])
        return Response(summary.to_dict(), status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def statistics(self, request):  # type: ignore
        return Response(services.revenue_statistics(), status=status.HTTP_200_OK)
