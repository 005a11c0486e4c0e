from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("email must not be empty")
        return value


class RegistrationResponse(BaseModel):
    ok: bool = True


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    id: int
    email: str
