"""Infrastructure modules for the alert dispatch service.

Centralized infrastructure components:
- configuration: Settings management (Settings, EmailSettings, AlertsSettings)
- logging: Structured logging setup and context binding (get_module_logger)
- operations: Operation results and error classification
- services: Dependency injection services (SettingsDep, AlertDispatcherDep)

``services`` is not re-exported here: it builds the alert system, which
itself depends on the other infrastructure packages.
"""

from infrastructure.logging import get_module_logger, logger
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "get_module_logger",
    "logger",
    "OperationResult",
    "OperationStatus",
]
