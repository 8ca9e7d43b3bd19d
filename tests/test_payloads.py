"""Tests for the generic request shaping helpers."""

import json

from mcp_server_sevdesk.payloads import (
    build_payload,
    build_positions,
    build_query,
    reference,
)
from mcp_server_sevdesk.tools.common import POSITION_REFERENCES, PositionArguments
from mcp_server_sevdesk.tools.contacts import CreateContactArguments, UpdateContactArguments


def test_reference_pair():
    assert reference(42, "Contact") == {"id": 42, "objectName": "Contact"}


def test_absent_optionals_are_not_sent():
    args = CreateContactArguments(name="ACME GmbH", categoryId=3)

    payload = build_payload(args, {"categoryId": ("category", "Category")})

    assert payload == {"name": "ACME GmbH", "category": {"id": 3, "objectName": "Category"}}


def test_explicit_falsy_values_are_sent():
    args = CreateContactArguments(name="ACME GmbH", categoryId=3, exemptVat=False, defaultTimeToPay=0)

    payload = build_payload(args, {"categoryId": ("category", "Category")})

    assert payload["exemptVat"] is False
    assert payload["defaultTimeToPay"] == 0


def test_reference_tag_does_not_depend_on_id():
    for category_id in (0, 3, 4, 28, 999999):
        args = CreateContactArguments(name="x", categoryId=category_id)
        payload = build_payload(args, {"categoryId": ("category", "Category")})
        assert payload["category"] == {"id": category_id, "objectName": "Category"}
        assert "categoryId" not in payload


def test_excluded_keys_are_dropped():
    args = UpdateContactArguments(contactId="5", name="New name")

    assert build_payload(args, exclude=("contactId",)) == {"name": "New name"}


def test_base_fields_are_overridden_by_arguments():
    payload = build_payload({"status": 200, "header": None}, base={"status": 100, "header": "AN-1"})

    assert payload == {"status": 200, "header": "AN-1"}


def test_query_reference_becomes_bracket_keys():
    query = build_query(
        {"limit": 50, "contactId": "7", "status": None},
        {"contactId": ("contact", "Contact")},
    )

    assert query == {"limit": 50, "contact[id]": "7", "contact[objectName]": "Contact"}


def test_query_joins_lists():
    assert build_query({"embed": ["contact", "positions"]}) == {"embed": "contact,positions"}


def test_positions_get_index_in_input_order():
    positions = [
        PositionArguments(name=f"Item {i}", quantity=1, price=10, taxRate=19, unityId=1) for i in range(4)
    ]

    items = build_positions(positions, "InvoicePos", POSITION_REFERENCES)

    assert [item["positionNumber"] for item in items] == [0, 1, 2, 3]
    assert [item["name"] for item in items] == ["Item 0", "Item 1", "Item 2", "Item 3"]
    assert all(item["objectName"] == "InvoicePos" and item["mapAll"] is True for item in items)


def test_explicit_position_numbers_are_kept():
    positions = [
        PositionArguments(name="a", quantity=1, price=1, taxRate=19, unityId=1),
        PositionArguments(name="b", quantity=1, price=1, taxRate=19, unityId=1, positionNumber=10),
        PositionArguments(name="c", quantity=1, price=1, taxRate=19, unityId=1),
    ]

    items = build_positions(positions, "OrderPos", POSITION_REFERENCES)

    assert [item["positionNumber"] for item in items] == [0, 10, 2]


def test_position_numbering_is_stable_on_rebuild():
    positions = [
        PositionArguments(name="a", quantity=1, price=1, taxRate=19, unityId=1),
        PositionArguments(name="b", quantity=1, price=1, taxRate=19, unityId=1, positionNumber=7),
    ]
    first = build_positions(positions, "InvoicePos", POSITION_REFERENCES)

    rebuilt = [
        PositionArguments(
            name=item["name"],
            quantity=item["quantity"],
            price=item["price"],
            taxRate=item["taxRate"],
            unityId=item["unity"]["id"],
            positionNumber=item["positionNumber"],
        )
        for item in first
    ]
    second = build_positions(rebuilt, "InvoicePos", POSITION_REFERENCES)

    assert [item["positionNumber"] for item in second] == [item["positionNumber"] for item in first]


def test_position_references_are_optional():
    with_part = PositionArguments(name="a", quantity=1, price=1, taxRate=19, unityId=2, partId=5)
    without_part = PositionArguments(name="b", quantity=1, price=1, taxRate=19, unityId=2)

    first, second = build_positions([with_part, without_part], "InvoicePos", POSITION_REFERENCES)

    assert first["part"] == {"id": 5, "objectName": "Part"}
    assert first["unity"] == {"id": 2, "objectName": "Unity"}
    assert "part" not in second
    assert "partId" not in first and "unityId" not in first


def test_payload_survives_json_round_trip():
    positions = [PositionArguments(name="a", quantity=2, price=100, taxRate=19, unityId=1, partId=3)]
    payload = {"invoicePosSave": build_positions(positions, "InvoicePos", POSITION_REFERENCES)}

    assert json.loads(json.dumps(payload)) == payload
