"""Pydantic request bodies for session endpoints."""

from pydantic import BaseModel

from inkbound.models import Action


class CreateSession(BaseModel):
    book: str | None = None


class SelectBody(BaseModel):
    index: int


class NavigateBody(BaseModel):
    screen: str


class ActionBody(BaseModel):
    action: Action


class LoadBody(BaseModel):
    path: str


class ScrollBody(BaseModel):
    delta: float
