"""Grid agents and the player marker for maze_horde."""

from __future__ import annotations

from .agent import AgentState, GridAgent
from .collisions import check_collision, colliding, first_collision
from .elite import BigfootBoss, BossZombie, EliteAgent, EliteProfile, Monster
from .player import PlayerMarker
from .zombie import Zombie, make_horde_zombie
from .zombie_dog import ZombieDog, make_horde_dog

__all__ = [
    "AgentState",
    "GridAgent",
    "check_collision",
    "colliding",
    "first_collision",
    "EliteAgent",
    "EliteProfile",
    "BossZombie",
    "BigfootBoss",
    "Monster",
    "PlayerMarker",
    "Zombie",
    "ZombieDog",
    "make_horde_zombie",
    "make_horde_dog",
]
