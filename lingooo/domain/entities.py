from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Role(str, Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


@dataclass(frozen=True)
class InstructorRef:
    uid: str
    name: str | None = None
    email: str | None = None
    photoURL: str | None = None


@dataclass(frozen=True)
class Class:
    id: str
    title: str
    price: float
    language: str | None = None
    enrolled: int = 0
    availableSeats: int = 0
    image: str | None = None
    instructor: InstructorRef | None = None


@dataclass(frozen=True)
class Review:
    review: Any
    rating: int | None = None
    createdAt: datetime | None = None


@dataclass(frozen=True)
class User:
    uid: str
    displayName: str | None = None
    photoURL: str | None = None
    email: str | None = None
    role: str = Role.STUDENT.value
    selectedClasses: list[str] = field(default_factory=list)
    enrolledClasses: list[str] = field(default_factory=list)
    reviews: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Flag:
    name: str
    image: str
