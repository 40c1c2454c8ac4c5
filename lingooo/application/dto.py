from dataclasses import dataclass

@dataclass
class RegisterUserInput:
    uid: str
    displayName: str
    photoURL: str | None
    email: str

@dataclass
class EnrollClassInput:
    uid: str
    class_id: str
