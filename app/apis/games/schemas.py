from __future__ import annotations

from pydantic import BaseModel


class TemplateRef(BaseModel):
    id: int
    name: str
    slug: str


class CreateGameResponse(BaseModel):
    id: str
    game_template: TemplateRef


class UpdateGameResponse(BaseModel):
    id: str
    updated: bool


class DeleteGameResponse(BaseModel):
    id: str
    deleted: bool


class PlayCountResponse(BaseModel):
    id: str
    total_played: int | None = None
