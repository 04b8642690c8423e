"""Tabs on a board."""

from __future__ import annotations

from uuid import UUID

from stickyboard.client import APIClient
from stickyboard.endpoint import Endpoint, HTTPMethod
from stickyboard.models import (
    IdResponse,
    SuccessResponse,
    TabCreateDto,
    TabDto,
    TabMoveDto,
    TabUpdateDto,
)


class TabService:
    def __init__(self, api: APIClient) -> None:
        self.api = api

    async def get_for_board(self, board_id: UUID) -> list[TabDto]:
        endpoint = Endpoint(HTTPMethod.GET, f"Tabs/board/{board_id}")
        return await self.api.request(endpoint, list[TabDto])

    async def create(self, dto: TabCreateDto) -> UUID:
        endpoint = Endpoint(HTTPMethod.POST, "Tabs").with_body(dto)
        res: IdResponse = await self.api.request(endpoint, IdResponse)
        return res.id

    async def update(self, tab_id: UUID, dto: TabUpdateDto) -> None:
        endpoint = Endpoint(HTTPMethod.PUT, f"Tabs/{tab_id}").with_body(dto)
        await self.api.request(endpoint, SuccessResponse)

    async def move(self, tab_id: UUID, new_position: int) -> None:
        endpoint = (
            Endpoint(HTTPMethod.PUT, f"Tabs/{tab_id}/move")
            .with_body(TabMoveDto(new_position=new_position))
        )
        await self.api.request(endpoint, SuccessResponse)

    async def delete(self, tab_id: UUID) -> None:
        await self.api.request(Endpoint(HTTPMethod.DELETE, f"Tabs/{tab_id}"), SuccessResponse)
