from marketplace.views.access import RoleGate, resolve_access
from marketplace.views.base import PageMessage, Screen
from marketplace.views.booking_list import BookingListScreen
from marketplace.views.booking_screen import BookingWizardScreen
from marketplace.views.catalog import CatalogScreen
from marketplace.views.dashboard import DashboardScreen
from marketplace.views.provider_profile import ProviderProfileScreen
from marketplace.views.schedule_editor import ScheduleEditorScreen
from marketplace.views.tables import ServiceTableScreen, UserTableScreen

__all__ = [
    "Screen", "PageMessage",
    "CatalogScreen", "BookingWizardScreen", "BookingListScreen",
    "ScheduleEditorScreen", "ProviderProfileScreen", "DashboardScreen",
    "ServiceTableScreen", "UserTableScreen",
    "RoleGate", "resolve_access",
]
