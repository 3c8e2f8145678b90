"""Per-user display settings. Each user reads and writes only their own."""

from fastapi import APIRouter

from galleria.auth.dependencies import CurrentUser, Store
from galleria.routes.schemas import SettingsUpdate
from galleria.types import PartitionSettings

router = APIRouter(tags=["settings"])


@router.get("/settings")
async def get_settings(store: Store, user: CurrentUser) -> PartitionSettings:
    # Reading may create the partition, so it goes through a session
    async with store.session() as session:
        return session.content.get_settings(user.id, user.id)


@router.patch("/settings")
async def update_settings(
    body: SettingsUpdate, store: Store, user: CurrentUser
) -> PartitionSettings:
    async with store.session() as session:
        return session.content.update_settings(user.id, user.id, body.to_patch())
