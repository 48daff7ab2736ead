"""Destructive full reset of both stores."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..models import ConfirmationPolicy, UploadConfig
from ..protocols import IAssetStore, IMetadataStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResetResult:
    records_deleted: int
    assets_deleted: int


def confirm_reset(
    ask: Callable[[str], str],
    policy: ConfirmationPolicy = ConfirmationPolicy.SINGLE,
    token: str = "RESET",
) -> bool:
    """Ask for ``token`` once or twice depending on ``policy``."""
    prompts = [f"Type {token} to confirm"]
    if policy is ConfirmationPolicy.DOUBLE:
        prompts.append(f"Type {token} again to wipe everything")
    for prompt in prompts:
        if ask(prompt).strip() != token:
            logger.info("Reset aborted: confirmation token mismatch")
            return False
    return True


class FullResetUseCase:
    """Delete every record, then every asset under the configured folder."""

    def __init__(
        self,
        store: IMetadataStore,
        assets: IAssetStore,
        config: Optional[UploadConfig] = None,
    ):
        self._store = store
        self._assets = assets
        self._config = config or UploadConfig()

    async def execute(self) -> ResetResult:
        records = await self._store.delete_all()
        logger.info("Metadata store cleared (%d records)", records)
        assets = await self._wipe_assets()
        logger.info("Asset folder %s wiped (%d assets)", self._config.asset_folder, assets)
        return ResetResult(records_deleted=records, assets_deleted=assets)

    async def _wipe_assets(self) -> int:
        deleted = 0
        cursor: Optional[str] = None
        while True:
            page = await self._assets.list_by_prefix(self._config.asset_folder, cursor)
            public_ids = page.get("public_ids") or []
            if not public_ids:
                break
            await self._assets.delete(public_ids)
            deleted += len(public_ids)
            cursor = page.get("next_cursor")
            if not cursor:
                break
        return deleted
