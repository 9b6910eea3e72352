"""API views for the package catalog and price calculation."""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .serializers import PackageSelectionSerializer, serialize_catalog


class CatalogView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):  # type: ignore
        return Response(serialize_catalog(), status=status.HTTP_200_OK)


class CalculatePriceView(APIView):
    """Preisberechnung für den Paket-Konfigurator."""

    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = PackageSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response({"breakdown": serializer.calculate()}, status=status.HTTP_200_OK)
