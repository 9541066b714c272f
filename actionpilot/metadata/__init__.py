from .types import (
    PAGE_URL_METADATA_KEY,
    Action,
    EntityType,
    MetadataDocument,
    SelectorKind,
    UIBinding,
    format_page_url,
)

__all__ = [
    'Action',
    'EntityType',
    'MetadataDocument',
    'PAGE_URL_METADATA_KEY',
    'SelectorKind',
    'UIBinding',
    'format_page_url',
]
