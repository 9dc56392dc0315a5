from shortlink.services.quota_tracker import QuotaTracker
from shortlink.services.shortener import Shortener, CreationResult


__all__ = [
    'QuotaTracker',
    'Shortener',
    'CreationResult',
]
