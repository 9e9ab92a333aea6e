from diaggate.catalog.catalog import MessageCatalog, render_template
from diaggate.catalog.loader import CatalogLoader, load_default_catalog
from diaggate.catalog.models import CatalogDocument, MessageTemplate

__all__ = [
    "CatalogDocument",
    "CatalogLoader",
    "MessageCatalog",
    "MessageTemplate",
    "load_default_catalog",
    "render_template",
]
