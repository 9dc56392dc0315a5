from shortlink.dao.base.short_link_base_dao import ShortLinkBaseDAO
from shortlink.dao.base.quota_base_dao import QuotaBaseDAO


__all__ = [
    'ShortLinkBaseDAO',
    'QuotaBaseDAO',
]
