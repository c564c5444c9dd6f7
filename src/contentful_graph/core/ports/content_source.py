from typing import Any, Protocol


class ContentSource(Protocol):
    async def fetch_entries(self, params: dict[str, str] | None = None) -> dict[str, Any]: ...

    async def fetch_assets(self, params: dict[str, str] | None = None) -> dict[str, Any]: ...

    async def fetch_asset(self, asset_id: str) -> dict[str, Any]: ...

    async def fetch_sync(self, params: dict[str, str] | None = None) -> dict[str, Any]: ...

    async def ping(self) -> bool: ...

    async def dispose(self) -> None: ...
