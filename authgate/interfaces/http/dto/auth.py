from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CredentialsRequestDTO(BaseModel):
    model_config = ConfigDict(str_max_length=256)

    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username cannot be empty")
        return value


class SignupRequestDTO(_CredentialsRequestDTO):
    # Password length policy is configurable and enforced by the signup use case.
    pass


class LoginRequestDTO(_CredentialsRequestDTO):
    pass


class CredentialResponseDTO(BaseModel):
    id: int
    username: str


class TokenResponseDTO(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class SubjectResponseDTO(BaseModel):
    subject: str
