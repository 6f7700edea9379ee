"""
Inventory error types.

Every error carries a machine-readable ``code`` and the HTTP status the API
answers with. None of them is fatal: callers either report them to the user
or recover by continuing with the best-known local state.

    InventoryError
    +-- RecordNotFound
    +-- DuplicateRecord
    +-- DuplicateChecker
    +-- InvalidChecker
    +-- InvalidQuery
    +-- MalformedImport
    +-- BackendError
        +-- BackendUnavailable
        +-- WriteFailed
"""


class InventoryError(Exception):
    code = "inventory_error"
    http_status = 400

    def __init__(self, message=None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self):
        return "Inventory operation failed."


class RecordNotFound(InventoryError):
    code = "record_not_found"
    http_status = 404

    def __init__(self, record_id):
        self.record_id = record_id
        super().__init__(f"Record {record_id} does not exist.")


class DuplicateRecord(InventoryError):
    code = "duplicate_record"
    http_status = 409

    def __init__(self, record_id):
        self.record_id = record_id
        super().__init__(f"Record {record_id} already exists.")


class DuplicateChecker(InventoryError):
    code = "duplicate_checker"
    http_status = 409

    def __init__(self, name):
        self.name = name
        super().__init__(f'Checker "{name}" already exists.')


class InvalidChecker(InventoryError):
    code = "invalid_checker"

    def default_message(self):
        return "Checker name must not be blank."


class InvalidQuery(InventoryError):
    code = "invalid_query"


class MalformedImport(InventoryError):
    code = "malformed_import"

    def default_message(self):
        return "Import payload must be a JSON array of inventory records."


class BackendError(InventoryError):
    code = "backend_error"
    http_status = 503


class BackendUnavailable(BackendError):
    code = "backend_unavailable"

    def default_message(self):
        return "Remote backend could not be loaded."


class WriteFailed(BackendError):
    code = "write_failed"

    def __init__(self, operation, message=None):
        self.operation = operation
        super().__init__(message or f"Remote write failed: {operation}.")
