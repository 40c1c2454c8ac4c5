from typing import Any
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

class TokenReq(BaseModel):
    identifier: str = Field(min_length=1, validation_alias=AliasChoices("identifier", "uid"))

class TokenResp(BaseModel):
    token: str

class AddUserReq(BaseModel):
    identifier: str = Field(min_length=1, validation_alias=AliasChoices("identifier", "uid"))
    displayName: str
    photoURL: str | None = None
    email: EmailStr

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    uid: str
    displayName: str | None = None
    photoURL: str | None = None
    email: str | None = None
    role: str

class RoleResp(BaseModel):
    role: str

class RoleUpdate(BaseModel):
    role: str = Field(pattern="^(student|instructor|admin)$")

class InstructorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    uid: str
    name: str | None = None
    email: str | None = None
    photoURL: str | None = None

class ClassOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
    id: str = Field(alias="_id")
    title: str
    price: float
    language: str | None = None
    enrolled: int = 0
    availableSeats: int = 0
    image: str | None = None
    instructor: InstructorOut | None = None

class SelectClassReq(BaseModel):
    classId: str = Field(min_length=1)
    identifier: str | None = Field(default=None, validation_alias=AliasChoices("identifier", "uid"))

class EnrollReq(BaseModel):
    classId: str = Field(min_length=1)

class FlagOut(BaseModel):
    name: str
    image: str

class ReviewCreate(BaseModel):
    review: str = Field(min_length=1)
    rating: int | None = Field(default=None, ge=1, le=5)

class ReviewOut(BaseModel):
    displayName: str | None = None
    photoURL: str | None = None
    review: Any

class PaymentIntentReq(BaseModel):
    price: float = Field(gt=0)

class PaymentIntentResp(BaseModel):
    clientSecret: str

class MessageResp(BaseModel):
    message: str
