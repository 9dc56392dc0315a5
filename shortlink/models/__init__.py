from shortlink.models.short_link_model import ShortLinkModel
from shortlink.models.quota_model import QuotaModel


__all__ = [
    'ShortLinkModel',
    'QuotaModel',
]
