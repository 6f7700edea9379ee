# REST API
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser

# Swagger
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema

from django.http import HttpResponse
from django.utils import timezone

# Serializer, Session
from ..serializers import InventoryRecordSerializer
from ..exceptions import InventoryError, MalformedImport
from ..services.session import IMPORT_MERGE, IMPORT_REPLACE, get_session
from .common import error_response
from ..utils.interchange import (
    decode_csv,
    decode_json,
    encode_csv,
    encode_json,
    encode_xlsx,
)

EXPORT_FORMATS = {
    "csv": (encode_csv, "text/csv; charset=utf-8"),
    "json": (encode_json, "application/json; charset=utf-8"),
    "xlsx": (
        encode_xlsx,
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ),
}


class InventoryExportView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_summary="Export stock table",
        operation_description="Every record in id order, as a file download.",
        manual_parameters=[
            openapi.Parameter(
                "format",
                openapi.IN_QUERY,
                type=openapi.TYPE_STRING,
                enum=list(EXPORT_FORMATS),
                description="csv (default) / json / xlsx",
            )
        ],
        responses={200: "File", 400: "Unknown format"},
        tags=["inventory - Export"],
    )
    def get(self, request):
        file_format = request.query_params.get("format", "csv").lower()
        if file_format not in EXPORT_FORMATS:
            return Response(
                {"error": f"format must be one of: {', '.join(EXPORT_FORMATS)}"},
                status=400,
            )

        encode, content_type = EXPORT_FORMATS[file_format]
        records = get_session().records()

        filename = f"inventory-{timezone.localdate():%Y%m%d}.{file_format}"
        response = HttpResponse(encode(records), content_type=content_type)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


class InventoryImportView(APIView):
    """
    POST: load records from a JSON array body or an uploaded .json / .csv file
    - mode=replace (default): the payload becomes the whole table
    - mode=merge: each payload record is upserted by id
    """

    permission_classes = [AllowAny]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @swagger_auto_schema(
        operation_summary="Import stock table",
        consumes=["application/json", "multipart/form-data"],
        manual_parameters=[
            openapi.Parameter(
                "mode",
                openapi.IN_QUERY,
                type=openapi.TYPE_STRING,
                enum=[IMPORT_REPLACE, IMPORT_MERGE],
            ),
            openapi.Parameter(
                name="file",
                in_=openapi.IN_FORM,
                type=openapi.TYPE_FILE,
                required=False,
                description="exported .json or .csv file",
            ),
        ],
        responses={200: InventoryRecordSerializer(many=True), 400: "Malformed payload"},
        tags=["inventory - Export"],
    )
    def post(self, request):
        mode = request.query_params.get("mode", IMPORT_REPLACE)
        if mode not in (IMPORT_REPLACE, IMPORT_MERGE):
            return Response(
                {"error": f"mode must be {IMPORT_REPLACE} or {IMPORT_MERGE}"},
                status=400,
            )

        try:
            records = self._decode(request)
            imported = get_session().import_records(records, mode=mode)
        except InventoryError as exc:
            return error_response(exc)

        return Response(InventoryRecordSerializer(imported, many=True).data)

    def _decode(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            return decode_json(request.data)

        try:
            text = upload.read().decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedImport("File is not UTF-8 text.") from exc

        if upload.name.lower().endswith(".csv"):
            return decode_csv(text)
        return decode_json(text)
