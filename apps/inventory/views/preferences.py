# REST API
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

# Swagger
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

# Serializer, Session
from ..serializers import CoverSerializer, PreferencesSerializer
from ..services.session import get_session

COVER_RESPONSE = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "cover_url": openapi.Schema(type=openapi.TYPE_STRING, example="/BioMINTech.png"),
    },
)


class CoverView(APIView):
    """
    GET : cover image reference (URL or data URL)
    PUT : replace it; null or "" restores the default cover
    """

    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Cover image",
        responses={200: COVER_RESPONSE},
        tags=["inventory - Settings"],
    )
    def get(self, request):
        return Response({"cover_url": get_session().cover})

    @swagger_auto_schema(
        operation_summary="Set cover image",
        request_body=CoverSerializer,
        responses={200: COVER_RESPONSE},
        tags=["inventory - Settings"],
    )
    def put(self, request):
        serializer = CoverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cover = get_session().set_cover(serializer.validated_data["cover_url"])
        return Response({"cover_url": cover})


class PreferencesView(APIView):
    """
    Status rule options of the running session (not persisted).
    """

    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Status rule options",
        responses={200: PreferencesSerializer},
        tags=["inventory - Settings"],
    )
    def get(self, request):
        return Response(get_session().preferences())

    @swagger_auto_schema(
        operation_summary="Change status rule options",
        operation_description=(
            "- auto_status: derive status from quantity on every change\n"
            "- low_threshold: quantities up to this value are Low (minimum 1)"
        ),
        request_body=PreferencesSerializer,
        responses={200: PreferencesSerializer},
        tags=["inventory - Settings"],
    )
    def patch(self, request):
        serializer = PreferencesSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        return Response(get_session().set_preferences(**serializer.validated_data))
