from dataclasses import dataclass, field
from typing import Dict

import pytest

from airtable_records import (
    Attachment, Checkbox, CoercionError, Date, DecodeError, FormulaResult, LongText, MultipleSelect,
    Rating, RecordLink, RequestError, Text, UnsupportedKindError, alias,
)
from conftest import FakeResponse, load_fixture


@dataclass
class MainTestRecord:
    when: Date = alias("When?", default="")
    rating: Rating = alias("Rating", default=0)
    name: Text = alias("Name", default="")
    notes: LongText = alias("Notes", default="")
    attachments: Attachment = alias("Attachments", default_factory=list)
    check: Checkbox = alias("Check", default=False)
    animals: MultipleSelect = alias("Animals", default_factory=list)
    cats: RecordLink = alias("Cats", default_factory=list)
    formula: FormulaResult = alias("Formula", default_factory=FormulaResult)


@dataclass
class NameOnly:
    Name: str = ""


@dataclass
class BadShape:
    meta: Dict[str, str] = field(default_factory=dict)


@pytest.mark.asyncio
async def test_get_maps_record(make_client):
    client, http = make_client(FakeResponse(200, load_fixture("get-main.json")))
    table = client.table("Main", MainTestRecord)

    main = await table.get("recfUW0mFSobdU9PX")

    assert http.calls[0]["url"].endswith("/v0/appXXX/Main/recfUW0mFSobdU9PX?")
    assert main.name == "Brian"
    assert main.when == "2018-03-12"
    assert main.rating == 4
    assert main.check is True
    assert main.animals == ["Cat", "Dog"]
    assert main.cats == ["recL5f1d8Kk6h9nQ2", "recAmG3qC7u1bZx0P"]
    assert main.formula.as_float() == 12.5
    assert len(main.attachments) == 1
    att = main.attachments[0]
    assert att.filename == "cat.jpg" and att.size == 48211
    assert att.thumbnails.small.width == 48
    assert att.thumbnails.full.url == ""


@pytest.mark.asyncio
async def test_get_into_existing_destination(make_client):
    client, _ = make_client(FakeResponse(200, {"id": "recfUW0mFSobdU9PX", "fields": {"Name": "Brian"}}))
    dest = NameOnly()
    out = await client.table("Main", NameOnly).get("recfUW0mFSobdU9PX", dest)
    assert out is dest
    assert dest.Name == "Brian"


@pytest.mark.asyncio
async def test_fetch_returns_envelope(make_client):
    client, _ = make_client(FakeResponse(200, load_fixture("get-main.json")))
    rec = await client.table("Main", NameOnly).fetch("recfUW0mFSobdU9PX")
    assert rec.created_time == "2018-03-12T18:24:51.000Z"
    assert rec.fields["Rating"] == 4


@pytest.mark.asyncio
async def test_list_follows_offsets(make_client):
    client, http = make_client(
        FakeResponse(200, load_fixture("list-page-1.json")),
        FakeResponse(200, load_fixture("list-page-2.json")),
    )
    records = await client.table("Main", MainTestRecord).list({"fields[]": ["Name", "Formula", "Animals"]})

    assert [r.name for r in records] == ["Brian", "Ada", "Grace"]
    assert records[1].formula.is_error
    assert records[2].animals == ["Owl"]
    assert len(http.calls) == 2
    assert "offset=" not in http.calls[0]["url"]
    assert "offset=itrQ2dJ8kS1%2FrecA1b2C3d4E5f6G7" in http.calls[1]["url"]
    assert http.calls[1]["url"].count("fields%5B%5D=") == 3
    assert client.limiter.takes == 2


@pytest.mark.asyncio
async def test_list_single_page(make_client):
    client, http = make_client(FakeResponse(200, load_fixture("list-page-1.json")))
    records = await client.table("Main", NameOnly).list(follow_offset=False)
    assert [r.Name for r in records] == ["Brian", "Ada"]
    assert len(http.calls) == 1


@pytest.mark.asyncio
async def test_request_error_propagates_unchanged(make_client):
    client, _ = make_client(FakeResponse(422, load_fixture("error-invalid-filter.json")))
    with pytest.raises(RequestError):
        await client.table("Main", NameOnly).list({"filterByFormula": "[this will make it fail]"})


@pytest.mark.asyncio
async def test_decode_error_propagates(make_client):
    client, _ = make_client(FakeResponse(200, b"<html>"))
    with pytest.raises(DecodeError):
        await client.table("Main", NameOnly).get("rec1")


@pytest.mark.asyncio
async def test_coercion_error_propagates(make_client):
    client, _ = make_client(FakeResponse(200, {"id": "rec1", "fields": {"Check": "yes"}}))
    with pytest.raises(CoercionError) as exc:
        await client.table("Main", MainTestRecord).get("rec1")
    assert exc.value.field == "Check"


def test_bad_shape_rejected_when_table_is_bound(make_client):
    client, _ = make_client()
    with pytest.raises(UnsupportedKindError):
        client.table("Main", BadShape)


@pytest.mark.asyncio
async def test_leading_slash_in_id_keeps_table_name(make_client):
    client, http = make_client(FakeResponse(200, {"id": "rec1", "fields": {}}))
    await client.table("Main", NameOnly).fetch("/rec1")
    assert http.calls[0]["url"] == "https://api.airtable.com/v0/appXXX/Main/rec1?"


@pytest.mark.asyncio
async def test_list_stops_when_offset_repeats(make_client):
    page = {"records": [{"id": "rec1", "fields": {"Name": "Brian"}}], "offset": "itr1/rec1"}
    client, http = make_client(FakeResponse(200, page), FakeResponse(200, page))
    records = await client.table("Main", NameOnly).list()
    assert [r.Name for r in records] == ["Brian", "Brian"]
    assert len(http.calls) == 2
