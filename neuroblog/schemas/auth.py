from pydantic import BaseModel, EmailStr, Field

class RegisterIn(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)

class LoginIn(BaseModel):
    # username or email
    login: str = Field(min_length=1)
    password: str = Field(min_length=1)
