"""UnitFlow API package."""

from unitflow.api.routes import (
    crash_cart_router,
    entry_router,
    export_router,
    navigation_router,
    preferences_router,
    register_storage_fault_handler,
    selection_router,
)

routers = [entry_router, crash_cart_router, selection_router, navigation_router, export_router, preferences_router]

__all__ = [
    "routers",
    "entry_router",
    "crash_cart_router",
    "selection_router",
    "navigation_router",
    "export_router",
    "preferences_router",
    "register_storage_fault_handler",
]
