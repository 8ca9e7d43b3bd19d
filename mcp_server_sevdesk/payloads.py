"""Request shaping for sevDesk API calls.

REFERENCE FIELDS:
----------------
sevDesk never accepts a bare foreign key. Every pointer to another object is
sent as a pair naming the target's id and its object type:

    {"id": 42, "objectName": "Contact"}

Tool arguments stay flat (``contactId``, ``unityId``, ``taxSetId``...). Each
tool family declares a small table mapping those flat names to the payload key
and the fixed object type, e.g. ``{"contactId": ("contact", "Contact")}``.

LIST FILTERS:
------------
The same tables drive list queries, where a reference becomes two bracket
parameters instead of a nested object:

    contactId=7  ->  contact[id]=7 & contact[objectName]=Contact

OPTIONAL FIELDS:
---------------
Arguments left out by the caller are never sent. No null placeholders reach
the API; an update without fields is sent as an empty object.

POSITIONS:
---------
Line items are mapped in input order. Each gets its ``objectName``,
``mapAll: true`` and a ``positionNumber`` (the caller's value, otherwise its
zero-based index in the list).
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# flat argument name -> (payload key, sevDesk objectName)
References = Mapping[str, Tuple[str, str]]

# integers stay integers in the request body
Number = Union[int, float]


class ToolArguments(BaseModel):
    """Base for tool argument models; fields are exposed in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


def reference(object_id: Any, object_name: str) -> Dict[str, Any]:
    """Build a sevDesk object reference."""
    return {"id": object_id, "objectName": object_name}


def _present_fields(args: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(args, BaseModel):
        return args.model_dump(by_alias=True, exclude_none=True)
    return {key: value for key, value in args.items() if value is not None}


def build_payload(
    args: Union[BaseModel, Mapping[str, Any]],
    references: Optional[References] = None,
    exclude: Iterable[str] = (),
    base: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Shape tool arguments into a sevDesk request body.

    ``base`` holds fixed or computed fields; caller-provided values win over it.
    """
    references = references or {}
    skipped = set(exclude)
    payload: Dict[str, Any] = dict(base or {})

    for key, value in _present_fields(args).items():
        if key in skipped:
            continue
        if key in references:
            target, object_name = references[key]
            payload[target] = reference(value, object_name)
        else:
            payload[key] = value
    return payload


def build_query(
    args: Union[BaseModel, Mapping[str, Any]],
    references: Optional[References] = None,
    exclude: Iterable[str] = (),
) -> Dict[str, Any]:
    """Shape list filter arguments into sevDesk query parameters."""
    references = references or {}
    skipped = set(exclude)
    query: Dict[str, Any] = {}

    for key, value in _present_fields(args).items():
        if key in skipped:
            continue
        if key in references:
            target, object_name = references[key]
            query[f"{target}[id]"] = value
            query[f"{target}[objectName]"] = object_name
        elif isinstance(value, list):
            query[key] = ",".join(str(item) for item in value)
        else:
            query[key] = value
    return query


def build_positions(
    positions: Iterable[Union[BaseModel, Mapping[str, Any]]],
    object_name: str,
    references: Optional[References] = None,
    numbered: bool = True,
) -> List[Dict[str, Any]]:
    """Shape a list of line items, keeping their order."""
    items = []
    for index, position in enumerate(positions):
        item = build_payload(position, references, base={"objectName": object_name})
        if numbered:
            item.setdefault("positionNumber", index)
        item["mapAll"] = True
        items.append(item)
    return items
