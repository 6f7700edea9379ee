# REST API
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status

# Swagger
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

# Serializer, Session
from ..serializers import CheckerSerializer, RosterSerializer
from ..exceptions import InventoryError
from ..services.session import get_session
from .common import error_response

ROSTER_RESPONSE = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "names": openapi.Schema(
            type=openapi.TYPE_ARRAY,
            items=openapi.Items(type=openapi.TYPE_STRING),
            example=["Nice", "Fah", "Anont"],
        )
    },
)


class CheckerListView(APIView):
    """
    GET  : roster
    POST : add one checker (case-insensitive duplicates are rejected)
    PUT  : replace the whole roster
    """

    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Checker roster",
        responses={200: ROSTER_RESPONSE},
        tags=["inventory - Checkers"],
    )
    def get(self, request):
        return Response({"names": get_session().checkers()})

    @swagger_auto_schema(
        operation_summary="Add checker",
        request_body=CheckerSerializer,
        responses={201: ROSTER_RESPONSE, 400: "Blank name", 409: "Duplicate name"},
        tags=["inventory - Checkers"],
    )
    def post(self, request):
        serializer = CheckerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            names = get_session().add_checker(serializer.validated_data["name"])
        except InventoryError as exc:
            return error_response(exc)
        return Response({"names": names}, status=status.HTTP_201_CREATED)

    @swagger_auto_schema(
        operation_summary="Replace roster",
        operation_description=(
            "Only the difference against the stored roster is written. "
            "Removing a checker keeps their name on records they already checked."
        ),
        request_body=RosterSerializer,
        responses={200: ROSTER_RESPONSE, 400: "Blank name", 409: "Duplicate name"},
        tags=["inventory - Checkers"],
    )
    def put(self, request):
        serializer = RosterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            names = get_session().set_checkers(serializer.validated_data["names"])
        except InventoryError as exc:
            return error_response(exc)
        return Response({"names": names})


class CheckerDetailView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Remove checker",
        manual_parameters=[
            openapi.Parameter("name", openapi.IN_PATH, type=openapi.TYPE_STRING, required=True)
        ],
        responses={200: ROSTER_RESPONSE},
        tags=["inventory - Checkers"],
    )
    def delete(self, request, name: str):
        try:
            names = get_session().remove_checker(name)
        except InventoryError as exc:
            return error_response(exc)
        return Response({"names": names})
