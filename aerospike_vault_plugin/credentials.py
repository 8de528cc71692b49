# -*- coding: utf-8 -*-

import secrets
import string
import time
from dataclasses import dataclass, field, replace

PASSWORD_PREFIX = "A1a-"


@dataclass
class UsernameConfig:
    display_name: str = ""
    role_name: str = ""


@dataclass
class StaticUserConfig:
    username: str
    password: str


@dataclass
class Statements:
    """Statements handed over by the control plane for an operation.

    The ``*_statements`` string fields are the deprecated ``;`` separated form and are
    only consulted through :func:`statement_compatibility_helper`.
    """

    creation: list = field(default_factory=list)
    revocation: list = field(default_factory=list)
    rollback: list = field(default_factory=list)
    renewal: list = field(default_factory=list)

    creation_statements: str = ""
    revocation_statements: str = ""
    rollback_statements: str = ""
    renewal_statements: str = ""


def _split_statements(value):
    return [s for s in (part.strip() for part in value.split(";")) if s]


def statement_compatibility_helper(statements):
    """Returns a copy of ``statements`` with empty lists filled from the deprecated fields."""
    if statements is None:
        return Statements()

    updated = replace(statements)
    for name in ("creation", "revocation", "rollback", "renewal"):
        if not getattr(updated, name):
            setattr(updated, name, _split_statements(getattr(updated, f"{name}_statements")))
    return updated


class CredentialsProducer:
    """Generates usernames and passwords for dynamically created users.

    Generated usernames look like ``v-<display>-<role>-<random>-<unix time>`` using
    the configured separator, with the display and role names truncated first and
    then the whole name truncated to ``username_len``. The unix time comes from
    ``clock``, ``time.time`` unless given.
    """

    def __init__(
        self,
        display_name_len=15,
        role_name_len=15,
        username_len=63,
        separator="-",
        password_length=20,
        clock=None,
    ):
        self._display_name_len = display_name_len
        self._role_name_len = role_name_len
        self._username_len = username_len
        self._separator = separator
        self._password_length = password_length
        self._clock = clock or time.time

    @property
    def username_len(self):
        return self._username_len

    @property
    def separator(self):
        return self._separator

    @staticmethod
    def _random_alphanumeric(length):
        letters = string.ascii_letters + string.digits
        return "".join(secrets.choice(letters) for _ in range(length))

    def generate_username(self, username_config=None):
        username_config = username_config or UsernameConfig()
        parts = ["v"]

        display_name = username_config.display_name or ""
        if self._display_name_len > 0:
            display_name = display_name[:self._display_name_len]
        if display_name:
            parts.append(display_name)

        role_name = username_config.role_name or ""
        if self._role_name_len > 0:
            role_name = role_name[:self._role_name_len]
        if role_name:
            parts.append(role_name)

        parts.append(self._random_alphanumeric(20))
        parts.append(str(int(self._clock())))

        username = self._separator.join(parts)
        if self._username_len > 0:
            username = username[:self._username_len]
        return username

    def generate_password(self):
        return PASSWORD_PREFIX + self._random_alphanumeric(self._password_length)
