import json

from papertrail.connection import SearchResult
from papertrail.formatting import format_event, format_page_json, format_page_text


def test_format_full_event():
    event = {
        "display_received_at": "Jan 05 10:00:00",
        "source_name": "www1",
        "program": "nginx",
        "message": "GET / 200",
    }
    assert format_event(event) == "Jan 05 10:00:00 www1 nginx: GET / 200"


def test_format_minimal_event():
    assert format_event({"message": "hello"}) == "hello"


def test_format_falls_back_to_received_at_and_hostname():
    event = {"received_at": "2024-01-05T10:00:00Z", "hostname": "db1", "message": "up"}
    assert format_event(event) == "2024-01-05T10:00:00Z db1 up"


def test_page_text_keeps_order():
    page = SearchResult(events=[{"message": "b"}, {"message": "a"}], reached_max_time=1)
    assert format_page_text(page) == ["b", "a"]


def test_page_json_uses_raw_response():
    data = {"events": [{"message": "a"}], "max_id": "9", "reached_time_limit": False}
    page = SearchResult(events=data["events"], reached_max_time=1, max_id="9", data=data)
    assert json.loads(format_page_json(page)) == data


def test_page_json_without_raw_response():
    page = SearchResult(events=[{"message": "a"}], reached_max_time=1, min_id="1", max_id="2")
    assert json.loads(format_page_json(page)) == {"events": [{"message": "a"}], "min_id": "1", "max_id": "2"}
