"""Airtable REST client that maps record fields onto typed dataclasses."""
from .columns import (
    Attachment, AttachmentItem, Checkbox, Date, FormulaResult, LongText, MultipleSelect,
    Number, Rating, RecordLink, Text, Thumbnail, Thumbnails,
)
from .envelope import Page, Record, decode_page, decode_record
from .errors import (
    AirtableError, CoercionError, DecodeError, RequestError, SetupError, TransportError,
    UnsupportedKindError,
)
from .http_client import Client
from .mapping import ParsesRaw, alias, map_fields, map_record, shape_of
from .query import Query, QueryEncoder
from .ratelimit import RateLimiter
from .resource import Resource

__version__ = "0.1.0"
