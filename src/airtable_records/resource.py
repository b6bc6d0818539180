"""
Table-level wrapper binding a table name, a Client and a record shape.

Provides:
- `fetch`: one record envelope (`Record`)
- `get`: one record mapped onto the shape
- `list_records` / `list`: every record of the table, following `offset`
  cursors page by page

Errors from the client, the decoder and the mapper pass through unchanged.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Generic, List, Optional, Type, TypeVar

from .envelope import Page, Record, decode_page, decode_record
from .mapping import map_fields, shape_of
from .query import Options, Query, encode_options

if TYPE_CHECKING:
    from .http_client import Client

R = TypeVar("R")


class Resource(Generic[R]):

    def __init__(self, name: str, client: "Client", record_type: Type[R]):
        shape_of(record_type)
        self.name = name
        self.client = client
        self.record_type = record_type

    def __repr__(self) -> str:
        return f"Resource({self.name!r}, {self.record_type.__name__})"

    async def fetch(self, record_id: str, options: Options = None) -> Record:
        body = await self.client.request_bytes("GET", f"{self.name}/{record_id.lstrip('/')}", options)
        return decode_record(body)

    async def get(self, record_id: str, dest: Optional[R] = None, options: Options = None) -> R:
        record = await self.fetch(record_id, options)
        if dest is None:
            dest = self.record_type()
        return map_fields(dest, record.fields)

    async def page(self, options: Options = None) -> Page:
        body = await self.client.request_bytes("GET", self.name, options)
        return decode_page(body)

    async def list_records(self, options: Options = None, *, follow_offset: bool = True) -> List[Record]:
        query = Query.parse(encode_options(options))
        records: List[Record] = []
        while True:
            page = await self.page(query)
            records.extend(page.records)
            if not follow_offset or not page.offset or page.offset in query.get("offset"):
                return records
            query = query.copy().offset(page.offset)

    async def list(self, options: Options = None, *, follow_offset: bool = True) -> List[R]:
        records = await self.list_records(options, follow_offset=follow_offset)
        return [map_fields(self.record_type(), r.fields) for r in records]
