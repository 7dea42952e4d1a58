"""Models package."""

from .user import UserAccount
from .global_settings import GlobalSettings
from .package import Package
from .transaction import LedgerTransaction
from .admin import AdminAccount
