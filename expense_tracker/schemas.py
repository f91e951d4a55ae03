"""Pydantic schemas for serialising expense tracking data."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, Iterator, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer, field_validator

from . import validation

TWO_PLACES = Decimal("0.01")


def _format_money(value: Decimal) -> str:
    return str(Decimal(value).quantize(TWO_PLACES))


Money = Annotated[Decimal, PlainSerializer(_format_money, return_type=str, when_used="json")]


def _raise_if(message: Optional[str]) -> None:
    if message:
        raise ValueError(message)


@dataclass(frozen=True)
class Patch:
    """Fields a client explicitly sent in a partial update.

    Absent fields are left untouched; a field present with ``None`` clears
    the stored value.
    """

    values: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def provided(self, name: str) -> bool:
        return name in self.values

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def apply(self, target: Any) -> None:
        for name, value in self.values.items():
            setattr(target, name, value)


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PatchModel(BaseModel):
    def to_patch(self) -> Patch:
        return Patch(self.model_dump(include=set(self.model_fields_set)))


# --- users -----------------------------------------------------------------


class RegisterRequest(BaseModel):
    email: str
    password: str
    full_name: str

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> Any:
        _raise_if(validation.check_email(value))
        return validation.normalize_email(value)

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> Any:
        _raise_if(validation.check_password(value))
        return value

    @field_validator("full_name", mode="before")
    @classmethod
    def check_full_name(cls, value: Any) -> Any:
        _raise_if(validation.check_required(value, "Full name"))
        value = value.strip()
        _raise_if(validation.check_length(value, "Full name", validation.FULL_NAME_MAX_LENGTH))
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> Any:
        _raise_if(validation.check_email(value))
        return validation.normalize_email(value)

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> Any:
        # Every non-empty string reaches verification.
        if not isinstance(value, str) or not value:
            raise ValueError("Password is required")
        return value


class UserRead(ORMModel):
    id: uuid.UUID
    email: str
    full_name: str
    created_at: datetime


class AuthResponse(BaseModel):
    token: str
    user: UserRead


# --- categories ------------------------------------------------------------


def _category_name(value: Any) -> str:
    _raise_if(validation.check_category_name(value))
    return value.strip()


def _icon(value: Any) -> Any:
    if value is not None:
        _raise_if(validation.check_length(value, "Icon", validation.ICON_MAX_LENGTH))
    return value


class CategoryCreate(BaseModel):
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> Any:
        return _category_name(value)

    @field_validator("color")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        _raise_if(validation.check_color(value))
        return value

    @field_validator("icon")
    @classmethod
    def check_icon(cls, value: Optional[str]) -> Optional[str]:
        return _icon(value)


class CategoryUpdate(PatchModel):
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> Any:
        return _category_name(value)

    @field_validator("color")
    @classmethod
    def check_color(cls, value: Optional[str]) -> Optional[str]:
        _raise_if(validation.check_color(value))
        return value

    @field_validator("icon")
    @classmethod
    def check_icon(cls, value: Optional[str]) -> Optional[str]:
        return _icon(value)


class CategoryRead(ORMModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime


# --- expenses --------------------------------------------------------------


def _amount(value: Any) -> Decimal:
    _raise_if(validation.check_amount(value))
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _description(value: Any) -> str:
    _raise_if(validation.check_required(value, "Description"))
    return value.strip()


def _expense_date(value: Any) -> Any:
    _raise_if(validation.check_date(value))
    return value


class ExpenseCreate(BaseModel):
    category_id: uuid.UUID
    amount: Decimal
    description: str
    expense_date: date

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> Any:
        return _amount(value)

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> Any:
        return _description(value)

    @field_validator("expense_date", mode="before")
    @classmethod
    def check_expense_date(cls, value: Any) -> Any:
        return _expense_date(value)


class ExpenseUpdate(PatchModel):
    category_id: Optional[uuid.UUID] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    expense_date: Optional[date] = None

    @field_validator("category_id", mode="before")
    @classmethod
    def check_category_id(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Category is required")
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> Any:
        return _amount(value)

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> Any:
        return _description(value)

    @field_validator("expense_date", mode="before")
    @classmethod
    def check_expense_date(cls, value: Any) -> Any:
        return _expense_date(value)


@dataclass(frozen=True)
class ExpenseFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[uuid.UUID] = None

    def check(self) -> Optional[str]:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            return "start_date must not be after end_date"
        return None


class ExpenseRead(ORMModel):
    id: uuid.UUID
    user_id: uuid.UUID
    category_id: uuid.UUID
    category_name: str
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    amount: Money
    description: str
    expense_date: date
    created_at: datetime
    updated_at: datetime


# --- summaries -------------------------------------------------------------


class MonthlySummary(BaseModel):
    year: int
    month: str
    total_amount: Money
    expense_count: int


class CategorySummary(BaseModel):
    category_id: uuid.UUID
    category_name: str
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    total_amount: Money
    expense_count: int
