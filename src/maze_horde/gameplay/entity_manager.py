from __future__ import annotations

import logging
from typing import Iterator

import pygame

from .. import difficulty
from ..entities import (
    BigfootBoss,
    BossZombie,
    GridAgent,
    Monster,
    Zombie,
    ZombieDog,
    colliding,
    first_collision,
    make_horde_dog,
    make_horde_zombie,
)
from ..models import HordeConfig, SpawnKind, SpawnTask
from ..world_grid import GridPos, manhattan
from .spawn import (
    SpawnQueue,
    build_horde_tasks,
    find_horde_spawn_positions,
    pick_spawn_cell,
)
from .state import SimulationContext

logger = logging.getLogger(__name__)

GROUP_NAMES = (
    "zombies",
    "zombie_dogs",
    "bosses",
    "monsters",
    "horde_zombies",
    "horde_dogs",
)

# Manhattan distance from the player -> update every Nth call.
FAR_THROTTLE = ((45, 4), (25, 2))
BOSS_THROTTLE = ((50, 2),)

SAFE_ZONE_DISTANCE = 5
ZOMBIE_MIN_START_DISTANCE = 3
BIGFOOT_MIN_START_DISTANCE = 4
MONSTER_MIN_START_DISTANCE = 6


def _throttle_for(distance: int, table: tuple[tuple[int, int], ...]) -> int:
    for limit, throttle in table:
        if distance > limit:
            return throttle
    return 1


class EntityManager:
    """Owns every live agent group and drives their per-tick updates."""

    def __init__(self, ctx: SimulationContext) -> None:
        self.ctx = ctx
        self.zombies: pygame.sprite.Group = pygame.sprite.Group()
        self.zombie_dogs: pygame.sprite.Group = pygame.sprite.Group()
        self.bosses: pygame.sprite.Group = pygame.sprite.Group()
        self.monsters: pygame.sprite.Group = pygame.sprite.Group()
        self.horde_zombies: pygame.sprite.Group = pygame.sprite.Group()
        self.horde_dogs: pygame.sprite.Group = pygame.sprite.Group()
        self.spawn_queue: SpawnQueue[GridAgent] = SpawnQueue(
            self.spawn_entity, batch_size=ctx.settings.spawn_batch_size
        )
        self.horde_spawned = False
        self.frame_counter = 0

    def groups(self) -> Iterator[tuple[str, pygame.sprite.Group]]:
        for name in GROUP_NAMES:
            yield name, getattr(self, name)

    def all_agents(self) -> list[GridAgent]:
        agents: list[GridAgent] = []
        for _, group in self.groups():
            agents.extend(group.sprites())
        return agents

    def __len__(self) -> int:
        return sum(len(group) for _, group in self.groups())

    def counts(self) -> dict[str, int]:
        return {name: len(group) for name, group in self.groups()}

    def occupied_cells(self) -> set[GridPos]:
        return {agent.position for agent in self.all_agents()}

    # --- level population -------------------------------------------------

    def _place(self, min_distance: int, occupied: set[GridPos], **kwargs) -> GridPos | None:
        ctx = self.ctx
        cell = pick_spawn_cell(
            ctx.maze_size,
            ctx.rng,
            avoid=ctx.start_pos,
            min_distance=min_distance,
            occupied=occupied,
            **kwargs,
        )
        if cell is not None:
            occupied.add(cell)
        return cell

    def populate_level(self) -> int:
        """Create the level's starting population. Returns the number created."""
        self.clear()
        ctx = self.ctx
        level = ctx.level
        occupied: set[GridPos] = set()

        bigfoots = difficulty.persistent_boss_count(level)
        for _ in range(bigfoots):
            cell = self._place(BIGFOOT_MIN_START_DISTANCE, occupied)
            if cell is not None:
                self.bosses.add(BigfootBoss(ctx, *cell, persistent=True))
        if bigfoots:
            ctx.notifier.notify("events.bigfoot_detected", count=bigfoots)

        for _ in range(difficulty.zombie_count(level)):
            cell = self._place(ZOMBIE_MIN_START_DISTANCE, occupied)
            if cell is not None:
                self.zombies.add(Zombie(ctx, *cell))

        dog_distance = max(4, ctx.maze_size // 3)
        for _ in range(difficulty.zombie_dog_count(level)):
            cell = self._place(dog_distance, occupied, forbidden=(ctx.goal_pos,))
            if cell is not None:
                self.zombie_dogs.add(ZombieDog(ctx, *cell))

        for _ in range(difficulty.monster_count(level)):
            cell = self._place(MONSTER_MIN_START_DISTANCE, occupied)
            if cell is not None:
                self.monsters.add(Monster(ctx, *cell))

        logger.info("Populated level %d: %s", level, self.counts())
        return len(self)

    # --- horde --------------------------------------------------------------

    def spawn_entity(self, task: SpawnTask) -> GridAgent:
        ctx = self.ctx
        agent: GridAgent
        if task.kind is SpawnKind.BOSS:
            agent = BossZombie(ctx, task.x, task.z, horde=True)
            self.bosses.add(agent)
        elif task.kind is SpawnKind.ZOMBIE:
            agent = make_horde_zombie(ctx, task.x, task.z)
            self.horde_zombies.add(agent)
        elif task.kind is SpawnKind.DOG:
            agent = make_horde_dog(ctx, task.x, task.z)
            self.horde_dogs.add(agent)
        else:
            raise ValueError(f"Unknown spawn kind: {task.kind!r}")
        agent.tag = task.tag
        return agent

    def spawn_zombie_horde(self, config: HordeConfig | None = None) -> int:
        """Queue one horde for this darkness cycle. Returns the number queued."""
        if self.horde_spawned:
            return 0
        self.horde_spawned = True
        ctx = self.ctx
        config = config or difficulty.horde_config(ctx.level)
        positions = find_horde_spawn_positions(
            config.total,
            ctx.maze_size,
            ctx.player_pos,
            ctx.rng,
            attempts=ctx.settings.horde_attempts,
        )
        if not positions:
            return 0
        tasks = build_horde_tasks(positions, config)
        self.spawn_queue.enqueue(tasks)
        ctx.notifier.notify("events.horde_incoming", count=len(tasks))
        logger.info("Zombie horde incoming: %d agent(s) queued", len(tasks))
        return len(tasks)

    def drain_spawn_queue(self) -> list[GridAgent]:
        return self.spawn_queue.drain_one_batch()

    def reset_horde_latch(self) -> None:
        self.horde_spawned = False

    def despawn_horde(self, keep_persistent: bool = False) -> int:
        removed = 0
        for boss in self.bosses.sprites():
            if keep_persistent and boss.persistent:
                continue
            boss.dispose()
            removed += 1
        for group in (self.horde_zombies, self.horde_dogs):
            for agent in group.sprites():
                agent.dispose()
                removed += 1
        self.spawn_queue.clear()
        self.horde_spawned = False
        return removed

    # --- per tick -------------------------------------------------------------

    def update_all(self, dt: float) -> int:
        """Advance every agent by one tick. Returns how many were updated.

        Far agents are only updated once every 2nd/4th call, but each update
        credits the calls elapsed since the agent's previous one, so their
        cadence in ticks does not change. Frozen calls are not counted.
        """
        updated = 0
        if not self.ctx.time_freeze_active:
            self.frame_counter += 1
            frame = self.frame_counter
            player = self.ctx.player_pos
            max_dt = self.ctx.settings.max_frame_ms / 1000
            for name, group in self.groups():
                table = BOSS_THROTTLE if name == "bosses" else FAR_THROTTLE
                for agent in group.sprites():
                    if agent.last_update_frame is None:
                        agent.last_update_frame = frame - 1
                    elapsed = frame - agent.last_update_frame
                    throttle = _throttle_for(manhattan(agent.position, player), table)
                    if elapsed < throttle:
                        continue
                    agent.last_update_frame = frame
                    agent.update(min(dt * elapsed, max_dt), ticks=elapsed)
                    updated += 1
        self.cleanup_dead()
        return updated

    def cleanup_dead(self) -> int:
        dead = [agent for agent in self.all_agents() if agent.dead]
        for agent in dead:
            agent.dispose()
        return len(dead)

    def kill(self, agent: GridAgent) -> int:
        """Retire an agent killed by the player and return its reward."""
        if agent.dead or agent.disposed:
            return 0
        agent.dead = True
        agent.dispose()
        return agent.kill_reward

    def find_collision(self, position: GridPos | None = None) -> GridAgent | None:
        return first_collision(
            self.ctx.grid, position or self.ctx.player_pos, self.all_agents()
        )

    def colliding_agents(self, position: GridPos | None = None) -> list[GridAgent]:
        return colliding(self.ctx.grid, position or self.ctx.player_pos, self.all_agents())

    def clear_safe_zone(
        self, start: GridPos | None = None, safe_distance: int = SAFE_ZONE_DISTANCE
    ) -> int:
        """Teleport agents camping near ``start`` into the opposite quadrant."""
        ctx = self.ctx
        start = start or ctx.start_pos
        size = ctx.maze_size
        half = max(1, size // 2)
        x_low = 0 if start[0] >= size / 2 else size - half
        z_low = 0 if start[1] >= size / 2 else size - half
        moved = 0
        for agent in self.all_agents():
            if manhattan(agent.position, start) >= safe_distance:
                continue
            agent.teleport(
                x_low + ctx.rng.randrange(half),
                z_low + ctx.rng.randrange(half),
            )
            moved += 1
        if moved:
            logger.debug("Cleared %d agent(s) from the safe zone", moved)
        return moved

    # --- events ---------------------------------------------------------------

    def begin_surge(self) -> int:
        surge_range = self.ctx.maze_size * 2
        zombies = self.zombies.sprites()
        for zombie in zombies:
            zombie.begin_surge(surge_range)
        return len(zombies)

    def end_surge(self) -> int:
        zombies = self.zombies.sprites()
        for zombie in zombies:
            zombie.end_surge()
        return len(zombies)

    def clear(self) -> None:
        for agent in self.all_agents():
            agent.dispose()
        self.spawn_queue.clear()
        self.horde_spawned = False

    def dispose(self) -> None:
        self.clear()


__all__ = ["EntityManager", "GROUP_NAMES"]
