from django.urls import path, include
from django.http import JsonResponse
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework.permissions import AllowAny

schema_view = get_schema_view(
    openapi.Info(
        title="LabStock API",
        default_version="v1",
        description="Laboratory consumable stock tracker with cross-device sync",
        license=openapi.License(name="MIT License"),
    ),
    public=True,
    permission_classes=[AllowAny],
)

# Landing response
def home(request):
    return JsonResponse({"message": "LabStock API. See /swagger or /redoc"})

urlpatterns = [
    path("", home, name="home"),
    path("api/v1/", include("api.v1.urls")),

    # Swagger UI
    path("swagger/", schema_view.with_ui("swagger", cache_timeout=0), name="schema-swagger-ui"),

    # ReDoc
    path("redoc/", schema_view.with_ui("redoc", cache_timeout=0), name="schema-redoc"),
]
