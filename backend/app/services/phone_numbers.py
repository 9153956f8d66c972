"""
Back Office API - Phone Number Codec
=====================================

What:  The one place that converts phone numbers between their structured
       form (list of PhoneNumber) and the JSON text stored in
       practice_information.phone_numbers.
Who:   PracticeInformationStore callers (the practice information service).

Round-trip law:
    decode_phone_numbers(encode_phone_numbers(xs)) == xs
    for every list of well-formed {number, type} pairs.

Wire format (compact JSON, key order number → type):
    [{"number":"123-456-7890","type":"main"},{"number":"987-654-3210","type":"fax"}]
"""

import json
from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.schemas.practice_information import PhoneNumber

_phone_number_list = TypeAdapter(List[PhoneNumber])

PhoneNumberLike = Union[PhoneNumber, Mapping[str, Any]]


def encode_phone_numbers(phone_numbers: Sequence[PhoneNumberLike]) -> str:
    """Serialize phone numbers to the stored JSON text."""
    items = _phone_number_list.validate_python(
        [p.model_dump() if isinstance(p, PhoneNumber) else dict(p) for p in phone_numbers]
    )
    return json.dumps(
        [{"number": p.number, "type": p.type} for p in items],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def decode_phone_numbers(raw: Optional[str]) -> List[PhoneNumber]:
    """
    Parse stored JSON text back into PhoneNumber objects.

    NULL or empty text decodes to an empty list.

    Raises:
        ValueError: the text is not JSON or not a list of {number, type}
    """
    if raw is None or not raw.strip():
        return []
    try:
        return _phone_number_list.validate_json(raw)
    except PydanticValidationError as exc:
        raise ValueError(f"Stored phone_numbers is not a valid list: {exc.error_count()} error(s)") from exc
