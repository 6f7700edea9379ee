from django.urls import path
from .views import (
    # Stock table
    InventoryRecordListView,
    InventoryRecordDetailView,
    AdjustQuantityView,
    ConfirmCheckView,
    InventorySummaryView,
    # Roster
    CheckerListView,
    CheckerDetailView,
    # Settings
    CoverView,
    PreferencesView,
    # Export / Import
    InventoryExportView,
    InventoryImportView,
)

urlpatterns = [
    path("items/", InventoryRecordListView.as_view(), name="inventory-items"),
    path(
        "items/<int:record_id>/",
        InventoryRecordDetailView.as_view(),
        name="inventory-item-detail",
    ),
    path(
        "items/<int:record_id>/adjust/",
        AdjustQuantityView.as_view(),
        name="inventory-item-adjust",
    ),
    path(
        "items/<int:record_id>/check/",
        ConfirmCheckView.as_view(),
        name="inventory-item-check",
    ),
    path("summary/", InventorySummaryView.as_view(), name="inventory-summary"),

    path("checkers/", CheckerListView.as_view(), name="inventory-checkers"),
    path(
        "checkers/<path:name>/",
        CheckerDetailView.as_view(),
        name="inventory-checker-detail",
    ),

    path("cover/", CoverView.as_view(), name="inventory-cover"),
    path("preferences/", PreferencesView.as_view(), name="inventory-preferences"),

    path("export/", InventoryExportView.as_view(), name="inventory-export"),
    path("import/", InventoryImportView.as_view(), name="inventory-import"),
]
