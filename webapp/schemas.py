"""
Submission API: Pydantic schemas

Field names accept the English attribute names as well as the labels used by
the public website's forms.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class SubmissionBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=120, validation_alias=AliasChoices("name", "Nome"))
    contact_phone: str = Field(
        ...,
        min_length=1,
        max_length=40,
        validation_alias=AliasChoices("contact_phone", "phone", "Telefone"),
    )
    contact_email: Optional[str] = Field(
        None,
        max_length=254,
        validation_alias=AliasChoices("contact_email", "email", "Email"),
    )
    notes: Optional[str] = Field(
        None,
        max_length=1000,
        validation_alias=AliasChoices("notes", "Observacoes", "Observações"),
    )

    @field_validator("contact_email", "notes", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("contact_email")
    @classmethod
    def _email_shape(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        local, _, domain = value.partition("@")
        if not local or "." not in domain:
            raise ValueError("not a valid email address")
        return value

    @field_validator("contact_phone")
    @classmethod
    def _phone_has_digits(cls, value: str) -> str:
        if not any(ch.isdigit() for ch in value):
            raise ValueError("phone number must contain digits")
        return value

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ReservationSubmission(SubmissionBase):
    reservation_date: str = Field(
        ...,
        validation_alias=AliasChoices("reservation_date", "date", "Data da Reserva"),
    )
    reservation_time: str = Field(
        ...,
        validation_alias=AliasChoices("reservation_time", "time", "Hora da Reserva"),
    )
    party_size: Optional[int] = Field(
        None,
        ge=1,
        le=100,
        validation_alias=AliasChoices("party_size", "people", "Numero de Pessoas", "Número de Pessoas"),
    )

    @field_validator("party_size", mode="before")
    @classmethod
    def _optional_party(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("reservation_date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError as exc:
            raise ValueError("date must be YYYY-MM-DD") from exc

    @field_validator("reservation_time")
    @classmethod
    def _clock_time(cls, value: str) -> str:
        try:
            return datetime.strptime(value, "%H:%M").strftime("%H:%M")
        except ValueError as exc:
            raise ValueError("time must be HH:MM") from exc


class OrderSubmission(SubmissionBase):
    items: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        validation_alias=AliasChoices("items", "Itens do Pedido"),
    )
    total: Optional[str] = Field(
        None,
        max_length=40,
        validation_alias=AliasChoices("total", "Total do Pedido"),
    )
    pickup_time: Optional[str] = Field(
        None,
        max_length=40,
        validation_alias=AliasChoices("pickup_time", "Horario de Retirada", "Horário de Retirada"),
    )

    @field_validator("total", "pickup_time", mode="before")
    @classmethod
    def _optional_order_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            value = str(value)
        return _blank_to_none(value)


class SubmissionResponse(BaseModel):
    id: str
    kind: str
    status: str
