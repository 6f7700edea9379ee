# REST API
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status

# Swagger
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

# Serializer, Session
from ..serializers import (
    InventoryRecordSerializer,
    InventoryQuerySerializer,
    RecordCreateSerializer,
    RecordUpdateSerializer,
    AdjustQuantitySerializer,
    ConfirmCheckSerializer,
)
from ..exceptions import InventoryError
from ..services.query import SORT_KEYS
from ..services.session import get_session
from .common import error_response

ID_PARAM = openapi.Parameter(
    "record_id", openapi.IN_PATH, type=openapi.TYPE_INTEGER, required=True
)


class InventoryRecordListView(APIView):
    """
    GET  : filtered / sorted stock table
    POST : add a record (id = max + 1 when omitted)
    """

    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Stock table",
        operation_description=(
            "All filters are AND-combined; \"all\" or an empty value disables one.\n\n"
            "- q: substring of name, category or location (case-insensitive)\n"
            "- category / status / location: exact match\n"
            "- only_low: keep Low and Empty records\n"
            "- sort + order: numeric for id/quantity, by instant for "
            "last_modified_at, collated text otherwise"
        ),
        manual_parameters=[
            openapi.Parameter("q", openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter("category", openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter(
                "status", openapi.IN_QUERY, type=openapi.TYPE_STRING,
                description="ปกติ / ใกล้หมด / หมด (or normal / low / empty)",
            ),
            openapi.Parameter("location", openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter("only_low", openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
            openapi.Parameter("sort", openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=list(SORT_KEYS)),
            openapi.Parameter("order", openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=["asc", "desc"]),
        ],
        responses={200: InventoryRecordSerializer(many=True)},
        tags=["inventory - View"],
    )
    def get(self, request):
        query = InventoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            records = get_session().records(query.to_filters(), query.to_sort())
        except InventoryError as exc:
            return error_response(exc)

        return Response(InventoryRecordSerializer(records, many=True).data)

    @swagger_auto_schema(
        operation_summary="Add record",
        request_body=RecordCreateSerializer,
        responses={201: InventoryRecordSerializer, 400: "Bad Request", 409: "Duplicate id"},
        tags=["inventory - Record CRUD"],
    )
    def post(self, request):
        serializer = RecordCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            record = get_session().create(**serializer.validated_data)
        except InventoryError as exc:
            return error_response(exc)

        return Response(InventoryRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class InventoryRecordDetailView(APIView):
    """
    GET / PATCH / DELETE one record
    """

    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Record detail",
        manual_parameters=[ID_PARAM],
        responses={200: InventoryRecordSerializer, 404: "Not Found"},
        tags=["inventory - View"],
    )
    def get(self, request, record_id: int):
        try:
            record = get_session().get(record_id)
        except InventoryError as exc:
            return error_response(exc)
        return Response(InventoryRecordSerializer(record).data)

    @swagger_auto_schema(
        operation_summary="Edit record fields",
        operation_description=(
            "Partial update. A status value only sticks while auto-status is off; "
            "otherwise status follows quantity."
        ),
        manual_parameters=[ID_PARAM],
        request_body=RecordUpdateSerializer,
        responses={200: InventoryRecordSerializer, 400: "Bad Request", 404: "Not Found"},
        tags=["inventory - Record CRUD"],
    )
    def patch(self, request, record_id: int):
        serializer = RecordUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            record = get_session().update(record_id, serializer.validated_data)
        except InventoryError as exc:
            return error_response(exc)
        return Response(InventoryRecordSerializer(record).data)

    @swagger_auto_schema(
        operation_summary="Delete record",
        operation_description="Idempotent: deleting an unknown id also answers 204.",
        manual_parameters=[ID_PARAM],
        responses={204: "Deleted"},
        tags=["inventory - Record CRUD"],
    )
    def delete(self, request, record_id: int):
        get_session().delete(record_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdjustQuantityView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Adjust quantity (+1 / -1)",
        operation_description="New quantity = max(0, quantity + delta).",
        manual_parameters=[ID_PARAM],
        request_body=AdjustQuantitySerializer,
        responses={200: InventoryRecordSerializer, 404: "Not Found"},
        tags=["inventory - Stock Adjust"],
    )
    def post(self, request, record_id: int):
        serializer = AdjustQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            record = get_session().adjust_quantity(record_id, serializer.validated_data["delta"])
        except InventoryError as exc:
            return error_response(exc)
        return Response(InventoryRecordSerializer(record).data)


class ConfirmCheckView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Record who checked the item",
        operation_description="Replaces the full checked_by list of the record.",
        manual_parameters=[ID_PARAM],
        request_body=ConfirmCheckSerializer,
        responses={200: InventoryRecordSerializer, 404: "Not Found"},
        tags=["inventory - Stock Adjust"],
    )
    def post(self, request, record_id: int):
        serializer = ConfirmCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            record = get_session().confirm_check(record_id, serializer.validated_data["checked_by"])
        except InventoryError as exc:
            return error_response(exc)
        return Response(InventoryRecordSerializer(record).data)
