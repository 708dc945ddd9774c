#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt
import uuid

from dataclasses import dataclass, field

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(eq=False)
class Person:
    id: uuid.UUID | None = None
    name: str = ""
    height: float = 0.0
    age: int = 0
    iq: int = 0
    birth_date: dt.datetime | None = None
    scores: list[int] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    ratings: dict[str, int] = field(default_factory=dict)
    friend: "Person | None" = None


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def person() -> Person:
    """Person with a friend, two levels deep, no cycles."""
    return Person(
        id=uuid.UUID("f14dd761-3260-4463-a4ad-6ba14de2026c"),
        name="Fai",
        height=160.5,
        age=20,
        iq=120,
        birth_date=dt.datetime(2029, 11, 16, 4, 5, 6),
        scores=[95, 88, 76],
        tags=["brooch", "Nevada"],
        ratings={"quality": 5, "speed": 4},
        friend=Person(
            id=uuid.UUID("cd55ace6-ac55-4f85-9434-82672b2fd9ee"),
            name="Sigma",
            height=180.3,
            age=81,
            scores=[93, 55, 99, 32],
            tags=["robots", "moon", "zero"],
        ),
    )


@pytest.fixture
def person_cls() -> type:
    return Person
