from rest_framework import serializers

from .records import Status
from .services.query import SORT_KEYS, Filters, SortState


def _validate_status(value):
    try:
        return Status.parse(value)
    except ValueError:
        raise serializers.ValidationError(
            f"Must be one of: {', '.join(s.value for s in Status)}"
        )


####### Output
class InventoryRecordSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    category = serializers.CharField()
    name = serializers.CharField()
    quantity = serializers.IntegerField()
    unit = serializers.CharField()
    status = serializers.CharField()
    status_label = serializers.SerializerMethodField()
    location = serializers.CharField()
    checked_by = serializers.ListField(child=serializers.CharField())
    last_modified_at = serializers.DateTimeField(allow_null=True)

    def get_status_label(self, obj):
        return obj.status.label


####### Record writes
class RecordCreateSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, min_value=1)
    category = serializers.CharField(allow_blank=True, default="", trim_whitespace=False)
    name = serializers.CharField(trim_whitespace=False)
    quantity = serializers.IntegerField(min_value=0, default=0)
    unit = serializers.CharField(allow_blank=True, default="", trim_whitespace=False)
    status = serializers.CharField(required=False)  # honoured when auto-status is off
    location = serializers.CharField(allow_blank=True, default="", trim_whitespace=False)
    checked_by = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )

    def validate_status(self, value):
        return _validate_status(value)


class RecordUpdateSerializer(serializers.Serializer):
    category = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    name = serializers.CharField(required=False, trim_whitespace=False)
    quantity = serializers.IntegerField(required=False)  # negative values clamp to 0
    unit = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    status = serializers.CharField(required=False)
    location = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    def validate_status(self, value):
        return _validate_status(value)


class AdjustQuantitySerializer(serializers.Serializer):
    delta = serializers.IntegerField()


class ConfirmCheckSerializer(serializers.Serializer):
    checked_by = serializers.ListField(child=serializers.CharField(), allow_empty=True)


####### Roster / settings
class CheckerSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)


class RosterSerializer(serializers.Serializer):
    names = serializers.ListField(
        child=serializers.CharField(max_length=100, allow_blank=True), allow_empty=True
    )


class CoverSerializer(serializers.Serializer):
    cover_url = serializers.CharField(allow_null=True, allow_blank=True)


class PreferencesSerializer(serializers.Serializer):
    auto_status = serializers.BooleanField(required=False)
    low_threshold = serializers.IntegerField(required=False)


####### Query
class InventoryQuerySerializer(serializers.Serializer):
    """Query-string parameters of the item list."""

    q = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(required=False, allow_blank=True)
    only_low = serializers.BooleanField(required=False, default=False)
    sort = serializers.ChoiceField(choices=SORT_KEYS, required=False, default="id")
    order = serializers.ChoiceField(choices=["asc", "desc"], required=False, default="asc")

    def to_filters(self):
        data = self.validated_data
        return Filters(
            q=data.get("q", ""),
            category=data.get("category"),
            status=data.get("status"),
            location=data.get("location"),
            only_low=data.get("only_low", False),
        )

    def to_sort(self):
        data = self.validated_data
        return SortState(key=data["sort"], ascending=data["order"] == "asc")


####### Interchange (camelCase file format)
class InterchangeRecordSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    category = serializers.CharField(allow_blank=True, trim_whitespace=False)
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    quantity = serializers.IntegerField(min_value=0)
    unit = serializers.CharField(allow_blank=True, trim_whitespace=False)
    status = serializers.CharField()
    location = serializers.CharField(allow_blank=True, trim_whitespace=False)
    checkedBy = serializers.ListField(child=serializers.CharField(), required=False)
    lastModifiedAt = serializers.DateTimeField(required=False, allow_null=True)

    def validate_status(self, value):
        return _validate_status(value)
