import re

from pydantic import BaseModel, EmailStr, field_validator, model_validator

PASSWORD_MIN_LENGTH = 8
SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    confirmPassword: str

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value):
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one upper-case letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one digit")
        if not SPECIAL_CHARACTERS.search(value):
            raise ValueError("Password must contain at least one special character")
        return value

    @model_validator(mode="after")
    def check_passwords_match(self):
        if self.password != self.confirmPassword:
            raise ValueError("Passwords must match")
        return self


class UserResponse(BaseModel):
    id: str
    email: EmailStr


class Token(BaseModel):
    access_token: str
    token_type: str
