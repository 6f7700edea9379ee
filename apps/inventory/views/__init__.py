from .common import InventorySummaryView
from .items import (
    InventoryRecordListView,
    InventoryRecordDetailView,
    AdjustQuantityView,
    ConfirmCheckView,
)
from .checkers import CheckerListView, CheckerDetailView
from .preferences import CoverView, PreferencesView
from .transfer import InventoryExportView, InventoryImportView
