"""Fixture records used as inputs by the scenario suites."""
from __future__ import annotations

from collections.abc import Callable

from src.shared.models.auth import Credential
from src.shared.models.passengers import PassengerRecord
from src.shared.utils import unique_suffix

# The first identity registered on a fresh auth service is granted the admin
# role; this account is bootstrapped before every other scenario.
SYSTEM_ADMIN = Credential(
    username="admin",
    password="admin123",
    email="admin@titanic.com",
)

NEW_PASSENGER = PassengerRecord(
    name="Smith, Mr. Test",
    pclass=2,
    sex="male",
    age=30,
    fare=25.50,
    embarked="Southampton",
    destination="New York",
    ticket="TEST-123",
)

ROSE_DATA = PassengerRecord(
    name="Bukater, Miss. Rose DeWitt",
    pclass=1,
    sex="female",
    age=17,
    fare=150.0,
    embarked="Southampton",
    destination="New York",
    cabin="B52",
    ticket="PC 17599",
)

JACK_DATA = PassengerRecord(
    name="Dawson, Mr. Jack",
    pclass=3,
    sex="male",
    age=20,
    fare=0.0,
    embarked="Southampton",
    destination="New York",
    ticket="A/5 21171",
)


def make_credential(
    prefix: str = "user",
    password: str = "password123",
    domain: str = "test.com",
    suffix: Callable[[], str] = unique_suffix,
) -> Credential:
    """Build a credential whose username and e-mail are unique per call."""
    token = suffix()
    return Credential(
        username=f"{prefix}_{token}",
        password=password,
        email=f"{prefix}_{token}@{domain}",
    )


def search_term(record: PassengerRecord) -> str:
    """Surname part of a ``"Surname, Title. Given"`` passenger name."""
    return record.name.split(",")[0]
