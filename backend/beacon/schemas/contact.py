"""SOS contact schemas."""

from pydantic import BaseModel, Field


class SosContactCreate(BaseModel):
    name: str = Field(default="", max_length=100)
    relation: str = Field(default="", max_length=50)
    email: str = Field(default="", max_length=254)
    mobile: str = Field(default="", max_length=30)


class SosContactUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    relation: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=254)
    mobile: str | None = Field(default=None, max_length=30)


class SosContactResponse(BaseModel):
    id: str
    name: str
    relation: str
    email: str
    mobile: str

    model_config = {"from_attributes": True}


class SosContactListResponse(BaseModel):
    message: str | None = None
    data: list[SosContactResponse]
