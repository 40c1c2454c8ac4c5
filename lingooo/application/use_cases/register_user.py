from ...domain.entities import User
from ..dto import RegisterUserInput

class UserAlreadyExists(ValueError):
    pass

class IUserRepository:
    def get_by_uid(self, uid: str) -> User | None: ...
    def create(self, data: RegisterUserInput, role: str = "student") -> User: ...

class RegisterUser:
    def __init__(self, repo: IUserRepository):
        self.repo = repo

    def execute(self, data: RegisterUserInput) -> User:
        if not data.uid.strip():
            raise ValueError("Identifier must not be blank")
        if self.repo.get_by_uid(data.uid):
            raise UserAlreadyExists("User already exists")
        return self.repo.create(data)
