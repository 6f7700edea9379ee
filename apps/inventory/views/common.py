# REST API
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status

# Swagger
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from ..services.session import get_session


def error_response(exc):
    """Translate an InventoryError into the API error body."""
    return Response({"error": exc.message, "code": exc.code}, status=exc.http_status)


# Dashboard panel: counts, filter options, sync state
class InventorySummaryView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Inventory summary",
        operation_description=(
            "Counts and filter options for the stock table.\n\n"
            "- total / low / empty record counts\n"
            "- categories, locations, statuses (each led by \"all\")\n"
            "- backend: local or remote\n"
            "- load_error: set when the remote load failed and the session "
            "fell back to local storage\n"
            "- write_errors: recent failed write-throughs"
        ),
        responses={
            200: openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    "total": openapi.Schema(type=openapi.TYPE_INTEGER, example=55),
                    "low": openapi.Schema(type=openapi.TYPE_INTEGER, example=18),
                    "empty": openapi.Schema(type=openapi.TYPE_INTEGER, example=11),
                    "categories": openapi.Schema(
                        type=openapi.TYPE_ARRAY,
                        items=openapi.Items(type=openapi.TYPE_STRING),
                        example=["all", "หมวดเลี้ยงเซลล์"],
                    ),
                    "locations": openapi.Schema(
                        type=openapi.TYPE_ARRAY,
                        items=openapi.Items(type=openapi.TYPE_STRING),
                        example=["all", "ตู้เย็น"],
                    ),
                    "statuses": openapi.Schema(
                        type=openapi.TYPE_ARRAY,
                        items=openapi.Items(type=openapi.TYPE_STRING),
                        example=["all", "ปกติ", "ใกล้หมด", "หมด"],
                    ),
                    "backend": openapi.Schema(type=openapi.TYPE_STRING, example="remote"),
                    "load_error": openapi.Schema(type=openapi.TYPE_STRING, x_nullable=True),
                    "write_errors": openapi.Schema(
                        type=openapi.TYPE_ARRAY, items=openapi.Items(type=openapi.TYPE_OBJECT)
                    ),
                },
            )
        },
        tags=["inventory - View"],
    )
    def get(self, request):
        return Response(get_session().summary(), status=status.HTTP_200_OK)
