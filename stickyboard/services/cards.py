"""Card lookup by id, tab or section, plus CRUD."""

from __future__ import annotations

from uuid import UUID

from stickyboard.client import APIClient
from stickyboard.endpoint import Endpoint, HTTPMethod
from stickyboard.models import (
    CardCreateDto,
    CardDto,
    CardUpdateDto,
    IdResponse,
    SuccessResponse,
)


class CardService:
    def __init__(self, api: APIClient) -> None:
        self.api = api

    async def get(self, card_id: UUID) -> CardDto:
        return await self.api.request(Endpoint(HTTPMethod.GET, f"Cards/{card_id}"), CardDto)

    async def get_by_tab(self, tab_id: UUID) -> list[CardDto]:
        return await self.api.request(Endpoint(HTTPMethod.GET, f"Cards/tab/{tab_id}"), list[CardDto])

    async def get_by_section(self, section_id: UUID) -> list[CardDto]:
        endpoint = Endpoint(HTTPMethod.GET, f"Cards/section/{section_id}")
        return await self.api.request(endpoint, list[CardDto])

    async def create(self, dto: CardCreateDto) -> UUID:
        endpoint = Endpoint(HTTPMethod.POST, "Cards").with_body(dto)
        res: IdResponse = await self.api.request(endpoint, IdResponse)
        return res.id

    async def update(self, card_id: UUID, dto: CardUpdateDto) -> None:
        endpoint = Endpoint(HTTPMethod.PUT, f"Cards/{card_id}").with_body(dto)
        await self.api.request(endpoint, SuccessResponse)

    async def delete(self, card_id: UUID) -> None:
        await self.api.request(Endpoint(HTTPMethod.DELETE, f"Cards/{card_id}"), SuccessResponse)
