"""
Back Office API - Practice Information Schemas
===============================================

What:  Pydantic models for PUT/GET /api/practiceInformation.
How:   The request model accepts the camelCase field names the front-end
       sends (practiceName, teleHealth, ...) and exposes snake_case
       attributes matching the storage columns. Responses use the storage
       (snake_case) names.

Two response shapes exist on purpose:
    PracticeInformationResponse   GET: phone_numbers is a structured list
    PracticeInformationRecord     PUT: phone_numbers is the stored JSON text
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PhoneNumber(BaseModel):
    """One practice phone number, e.g. {"number": "123-456-7890", "type": "main"}."""

    model_config = ConfigDict(extra="ignore")

    number: str = Field(strict=True, description="Phone number as entered")
    type: str = Field(strict=True, description="Label such as main, fax, mobile")


class PracticeInformationUpdate(BaseModel):
    """
    Validated body of PUT /api/practiceInformation.

    Rules:
        practiceName, practiceEmail, timeZone  non-empty text
        practiceLogo                           optional text
        phoneNumbers                           required list of {number, type}
        teleHealth                             required boolean (no coercion)

    Every violation is reported at once; pydantic collects all field errors
    before raising.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    practice_name: str = Field(alias="practiceName", strict=True, min_length=1)
    practice_email: str = Field(alias="practiceEmail", strict=True, min_length=1)
    time_zone: str = Field(alias="timeZone", strict=True, min_length=1)
    practice_logo: Optional[str] = Field(default=None, alias="practiceLogo", strict=True)
    phone_numbers: List[PhoneNumber] = Field(alias="phoneNumbers")
    tele_health: bool = Field(alias="teleHealth", strict=True)

    @field_validator("practice_name", "practice_email", "time_zone")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        """Whitespace-only values count as empty."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class PracticeInformationResponse(BaseModel):
    """GET /api/practiceInformation: the stored record with decoded phone numbers."""

    id: str
    clinician_id: str
    practice_name: str
    practice_email: str
    time_zone: str
    practice_logo: Optional[str] = None
    phone_numbers: List[PhoneNumber] = Field(default_factory=list)
    tele_health: bool


class PracticeInformationRecord(BaseModel):
    """
    PUT /api/practiceInformation: write confirmation.

    Mirrors the stored row; phone_numbers stays in its serialized text form.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    clinician_id: str
    practice_name: str
    practice_email: str
    time_zone: str
    practice_logo: Optional[str] = None
    phone_numbers: str
    tele_health: bool
