from quire.db.models.page import META_KEYS, Page, PageStatus, PageTemplate, prune_meta_data
from quire.db.models.page_content import PageContent

__all__ = ["META_KEYS", "Page", "PageContent", "PageStatus", "PageTemplate", "prune_meta_data"]
