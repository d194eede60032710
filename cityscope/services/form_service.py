"""Client-side validation for the profile completion and auth forms."""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from ..constants import PASSWORD_MIN_LENGTH, PROFILE_BIO_MAX_LENGTH, PROFILE_NAME_MAX_LENGTH
from ..schemas import AuthRequest, ProfileUpdateRequest

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


class FormStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    ERROR = "error"


@dataclass
class _FormState(ABC):
    """Field values, field-scoped errors, and submission status shared by both forms."""

    FIELDS: ClassVar[tuple[str, ...]] = ()

    errors: dict[str, str] = field(default_factory=dict)
    api_error: str = ""
    status: FormStatus = FormStatus.IDLE

    @property
    def is_submitting(self) -> bool:
        return self.status is FormStatus.SUBMITTING

    def set_field(self, name: str, value: str) -> None:
        """Apply an edit, clearing that field's error and any API error."""

        if name not in self.FIELDS:
            raise KeyError(name)
        if not self._accepts(name, value):
            return
        setattr(self, name, value)
        self.api_error = ""
        self.errors.pop(name, None)
        if self.status is FormStatus.ERROR:
            self.status = FormStatus.IDLE

    def update(self, values: dict[str, str]) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def _accepts(self, name: str, value: str) -> bool:
        return True

    @abstractmethod
    def _collect_errors(self) -> dict[str, str]:
        """Return ``{field: message}`` for every invalid field."""

    def validate(self) -> bool:
        self.errors = self._collect_errors()
        return not self.errors

    def begin_submit(self) -> bool:
        """Validate and enter ``submitting``; returns False when blocked."""

        if self.is_submitting or not self.validate():
            return False
        self.status = FormStatus.SUBMITTING
        self.api_error = ""
        return True

    def finish_submit(self, error: str | None = None) -> None:
        if error:
            self.api_error = error
            self.status = FormStatus.ERROR
        else:
            self.status = FormStatus.IDLE


@dataclass
class ProfileForm(_FormState):
    FIELDS: ClassVar[tuple[str, ...]] = ("first_name", "last_name", "bio", "city")

    first_name: str = ""
    last_name: str = ""
    bio: str = ""
    city: str = ""
    cities: tuple[str, ...] = ()

    def _accepts(self, name: str, value: str) -> bool:
        # Edits that would push the bio past its limit are ignored.
        return not (name == "bio" and len(value) > PROFILE_BIO_MAX_LENGTH)

    def _collect_errors(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        first_name = self.first_name.strip()
        if not first_name:
            errors["first_name"] = "First name is required"
        elif len(first_name) > PROFILE_NAME_MAX_LENGTH:
            errors["first_name"] = f"First name cannot exceed {PROFILE_NAME_MAX_LENGTH} characters"

        last_name = self.last_name.strip()
        if not last_name:
            errors["last_name"] = "Last name is required"
        elif len(last_name) > PROFILE_NAME_MAX_LENGTH:
            errors["last_name"] = f"Last name cannot exceed {PROFILE_NAME_MAX_LENGTH} characters"

        if not self.city:
            errors["city"] = "Please select a city"
        elif self.cities and self.city not in self.cities:
            errors["city"] = "Please select a city"
        return errors

    def payload(self) -> dict[str, str]:
        request = ProfileUpdateRequest(
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            bio=self.bio.strip(),
            city=self.city,
        )
        return request.model_dump(by_alias=True)


@dataclass
class AuthForm(_FormState):
    FIELDS: ClassVar[tuple[str, ...]] = ("email", "password")

    email: str = ""
    password: str = ""
    # Signup is the default landing mode.
    is_login: bool = False

    def toggle_mode(self) -> None:
        self.is_login = not self.is_login
        self.email = ""
        self.password = ""
        self.errors = {}
        self.api_error = ""
        self.status = FormStatus.IDLE

    def _collect_errors(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not self.email.strip():
            errors["email"] = "Email is required"
        elif not EMAIL_PATTERN.search(self.email):
            errors["email"] = "Please enter a valid email address"

        if not self.password.strip():
            errors["password"] = "Password is required"
        elif len(self.password) < PASSWORD_MIN_LENGTH:
            errors["password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
        return errors

    def payload(self) -> dict[str, str]:
        return AuthRequest(email=self.email.strip(), password=self.password).model_dump()


__all__ = ["AuthForm", "EMAIL_PATTERN", "FormStatus", "ProfileForm"]
