"""Reference data loader

The booking core only reads properties and rooms; they are owned elsewhere.
This loads them, with their room categories, from a JSON document so a
running service has something to book against:

    {"properties": [...], "room_categories": [...], "rooms": [...]}
"""
import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel

from domain.entities import Property, Room, RoomCategory
from domain.repositories import PropertyRepository, RoomCategoryRepository, RoomRepository

logger = logging.getLogger(__name__)


class SeedData(BaseModel):
    properties: List[Property] = []
    room_categories: List[RoomCategory] = []
    rooms: List[Room] = []


class SeedSummary(BaseModel):
    properties: int
    room_categories: int
    rooms: int


def read_seed_file(path: Union[str, Path]) -> SeedData:
    with open(path, encoding="utf-8") as f:
        return SeedData.model_validate(json.load(f))


async def load_seed_data(
    data: SeedData,
    property_repo: PropertyRepository,
    category_repo: RoomCategoryRepository,
    room_repo: RoomRepository
) -> SeedSummary:
    """Save properties first; categories and rooms must point at a known property"""
    for property_ in data.properties:
        await property_repo.save(property_)

    for category in data.room_categories:
        if not await property_repo.find_by_id(category.property_id):
            raise ValueError(f"Room category '{category.name}' refers to unknown property {category.property_id}")
        await category_repo.save(category)

    for room in data.rooms:
        if not await property_repo.find_by_id(room.property_id):
            raise ValueError(f"Room {room.room_id} refers to unknown property {room.property_id}")
        if room.room_category:
            names = {c.name for c in await category_repo.find_by_property(room.property_id)}
            if room.room_category not in names:
                logger.warning(
                    "Room %s uses category '%s', which is not defined for property %s",
                    room.room_id, room.room_category, room.property_id
                )
        await room_repo.save(room)

    summary = SeedSummary(
        properties=len(data.properties),
        room_categories=len(data.room_categories),
        rooms=len(data.rooms)
    )
    logger.info(
        "Loaded reference data: %d properties, %d room categories, %d rooms",
        summary.properties, summary.room_categories, summary.rooms
    )
    return summary


async def load_seed_file(
    path: Optional[Union[str, Path]],
    property_repo: PropertyRepository,
    category_repo: RoomCategoryRepository,
    room_repo: RoomRepository
) -> Optional[SeedSummary]:
    """Load ``path`` if it is set and exists; a missing file leaves the stores empty"""
    if not path:
        return None
    if not Path(path).is_file():
        logger.warning("Seed file %s not found, starting without reference data", path)
        return None
    return await load_seed_data(read_seed_file(path), property_repo, category_repo, room_repo)
