"""Profile and password changes for the signed-in user."""

from __future__ import annotations

from stickyboard.client import APIClient
from stickyboard.endpoint import Endpoint, HTTPMethod
from stickyboard.models import ChangePasswordDto, UserUpdateDto


class UserService:
    def __init__(self, api: APIClient) -> None:
        self.api = api

    async def update_self(self, dto: UserUpdateDto) -> None:
        # The server answers with an envelope whose data may be empty
        await self.api.request(Endpoint(HTTPMethod.PUT, "Users/me").with_body(dto))

    async def change_password(self, old_password: str, new_password: str) -> None:
        dto = ChangePasswordDto(old_password=old_password, new_password=new_password)
        await self.api.request(Endpoint(HTTPMethod.PUT, "Users/me/password").with_body(dto))
