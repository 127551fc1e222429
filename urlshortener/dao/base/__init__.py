from urlshortener.dao.base.short_url_base_dao import ShortURLBaseDAO
from urlshortener.dao.base.quota_base_dao import QuotaBaseDAO


__all__ = [
    'ShortURLBaseDAO',
    'QuotaBaseDAO',
]
