"""Board CRUD plus rename and folder/org moves."""

from __future__ import annotations

from uuid import UUID

from stickyboard.client import APIClient
from stickyboard.endpoint import Endpoint, HTTPMethod
from stickyboard.models import (
    BoardCreateDto,
    BoardDto,
    BoardUpdateDto,
    IdResponse,
    MoveBoardFolderDto,
    MoveBoardOrgDto,
    RenameBoardDto,
    SuccessResponse,
)


class BoardService:
    def __init__(self, api: APIClient) -> None:
        self.api = api

    async def get_mine(self) -> list[BoardDto]:
        """Boards owned by the current user."""
        return await self.api.request(Endpoint(HTTPMethod.GET, "Boards/mine"), list[BoardDto])

    async def get_accessible(self) -> list[BoardDto]:
        """Boards the current user owns or has been granted access to."""
        endpoint = Endpoint(HTTPMethod.GET, "Boards/accessible")
        return await self.api.request(endpoint, list[BoardDto])

    async def search(self, keyword: str) -> list[BoardDto]:
        """Search accessible boards; an empty keyword lists them all."""
        endpoint = Endpoint(HTTPMethod.GET, "Boards/search").with_query("keyword", keyword or None)
        return await self.api.request(endpoint, list[BoardDto])

    async def get(self, board_id: UUID) -> BoardDto:
        return await self.api.request(Endpoint(HTTPMethod.GET, f"Boards/{board_id}"), BoardDto)

    async def create(self, dto: BoardCreateDto) -> UUID:
        endpoint = Endpoint(HTTPMethod.POST, "Boards").with_body(dto)
        res: IdResponse = await self.api.request(endpoint, IdResponse)
        return res.id

    async def update(self, board_id: UUID, dto: BoardUpdateDto) -> None:
        endpoint = Endpoint(HTTPMethod.PUT, f"Boards/{board_id}").with_body(dto)
        await self.api.request(endpoint, SuccessResponse)

    async def delete(self, board_id: UUID) -> None:
        await self.api.request(Endpoint(HTTPMethod.DELETE, f"Boards/{board_id}"), SuccessResponse)

    async def rename(self, board_id: UUID, title: str) -> None:
        endpoint = (
            Endpoint(HTTPMethod.PATCH, f"Boards/{board_id}/rename")
            .with_body(RenameBoardDto(title=title))
        )
        await self.api.request(endpoint, SuccessResponse)

    async def move_to_folder(self, board_id: UUID, folder_id: UUID | None) -> None:
        """Move a board into a folder, or out of any folder with ``None``."""
        endpoint = (
            Endpoint(HTTPMethod.PATCH, f"Boards/{board_id}/folder")
            .with_body(MoveBoardFolderDto(folder_id=folder_id))
        )
        await self.api.request(endpoint, SuccessResponse)

    async def move_to_org(self, board_id: UUID, org_id: UUID | None) -> None:
        endpoint = (
            Endpoint(HTTPMethod.PATCH, f"Boards/{board_id}/org")
            .with_body(MoveBoardOrgDto(org_id=org_id))
        )
        await self.api.request(endpoint, SuccessResponse)
