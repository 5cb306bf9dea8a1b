import base64

from webfetcher.domain.records import (
    Command,
    CrawlRecord,
    DeleteRecord,
    reference_for,
    run_id_for,
)


def test_reference_is_deterministic_base64_of_url():
    url = "http://example.com/page"
    assert reference_for(url) == base64.b64encode(url.encode()).decode()
    assert reference_for(url) == reference_for(url)
    assert reference_for(url) != reference_for(url + "2")


def test_run_id_is_filename_safe():
    run_id = run_id_for("http://example.com/?a=b&c=d~~~")
    assert "/" not in run_id
    assert "+" not in run_id


def test_add_record_event_fields():
    record = CrawlRecord(
        url="http://example.com/a",
        root_url="http://example.com",
        content=b"<html></html>",
        headers={"Content-Type": ["text/html"]},
        child_pages=("b",),
        external_pages=("http://other.com",),
        epoch_second=1700000000,
        uuid="fixed",
    )
    event = record.to_event()

    assert event["reference"] == reference_for("http://example.com/a")
    assert event["content"] == base64.b64encode(b"<html></html>").decode()
    assert event["url"] == "http://example.com/a"
    assert event["context"] == "http://example.com"
    assert event["status"] == 200
    assert event["command"] == "ADD"
    assert event["epochSecond"] == 1700000000
    assert event["uuid"] == "fixed"
    assert event["childPages"] == ["b"]
    assert event["externalPages"] == ["http://other.com"]
    assert event["Content-Type"] == ["text/html"]


def test_each_record_gets_its_own_uuid():
    a = CrawlRecord(url="http://x", root_url="http://x", content=b"")
    b = CrawlRecord(url="http://x", root_url="http://x", content=b"")
    assert a.uuid != b.uuid
    assert a.reference == b.reference


def test_delete_record_event_has_reference_and_command_only():
    record = DeleteRecord.for_url("http://example.com/gone")
    assert record.command is Command.DELETE
    assert record.to_event() == {
        "reference": reference_for("http://example.com/gone"),
        "command": "DELETE",
    }
