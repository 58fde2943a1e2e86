# services/__init__.py

"""
Модуль сервисов DailyGrid

Клиент сервера состояния и связка хранилища привычек с ним.
"""

from .persistence import GatewayError, PersistenceGateway
from .tracker_service import TrackerService

__all__ = [
    'GatewayError',
    'PersistenceGateway',
    'TrackerService',
]
