"""Sections within a tab, including reparent/reorder moves."""

from __future__ import annotations

from uuid import UUID

from stickyboard.client import APIClient
from stickyboard.endpoint import Endpoint, HTTPMethod
from stickyboard.models import (
    IdResponse,
    SectionCreateDto,
    SectionDto,
    SectionMoveDto,
    SectionUpdateDto,
    SuccessResponse,
)


class SectionService:
    def __init__(self, api: APIClient) -> None:
        self.api = api

    async def get_for_tab(self, tab_id: UUID) -> list[SectionDto]:
        endpoint = Endpoint(HTTPMethod.GET, f"Sections/tab/{tab_id}")
        return await self.api.request(endpoint, list[SectionDto])

    async def create(self, dto: SectionCreateDto) -> UUID:
        endpoint = Endpoint(HTTPMethod.POST, "Sections").with_body(dto)
        res: IdResponse = await self.api.request(endpoint, IdResponse)
        return res.id

    async def update(self, section_id: UUID, dto: SectionUpdateDto) -> None:
        endpoint = Endpoint(HTTPMethod.PUT, f"Sections/{section_id}").with_body(dto)
        await self.api.request(endpoint, SuccessResponse)

    async def move(self, section_id: UUID, dto: SectionMoveDto) -> None:
        """Reorder a section and optionally give it a new parent."""
        endpoint = Endpoint(HTTPMethod.PUT, f"Sections/{section_id}/move").with_body(dto)
        await self.api.request(endpoint, SuccessResponse)

    async def delete(self, section_id: UUID) -> None:
        endpoint = Endpoint(HTTPMethod.DELETE, f"Sections/{section_id}")
        await self.api.request(endpoint, SuccessResponse)
