"""Pydantic request and response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Simulate ---

class SimulateRequest(BaseModel):
    friendly: str = Field("ranged_kite", description="Catalog name of the friendly composition")
    enemy: str = Field("heavy_melee", description="Catalog name of the enemy composition")
    battles: int = Field(10, ge=1, le=1000)
    seed: int | None = None
    entropy: bool = True
    record: bool = False
    heatmap: bool = False


class SideStatsSchema(BaseModel):
    total_damage: int
    total_healing: int
    avg_damage: float
    avg_healing: float
    avg_survivors: float


class BattleSummarySchema(BaseModel):
    winner: str
    ticks: int
    friendly_survivors: int
    enemy_survivors: int


class SimulateResponse(BaseModel):
    label: str
    friendly_cost: int
    enemy_cost: int
    iterations: int
    wins: int
    losses: int
    draws: int
    win_rate: float
    avg_ticks: float
    friendly: SideStatsSchema
    enemy: SideStatsSchema
    battles: list[BattleSummarySchema] = []
    heatmap: dict | None = None
    recorded: bool = False


# --- Compositions ---

class UnitSchema(BaseModel):
    role: str
    body: list[str]
    cost: int


class CompositionSchema(BaseModel):
    name: str
    cost: int
    units: list[UnitSchema]


# --- Config ---

class SimulationConfigResponse(BaseModel):
    seed: int
    grid_width: int
    grid_height: int
    default_terrain: str
    max_ticks: int
    num_workers: int
    entropy_enabled: bool
    friendly_spawn: tuple[int, int]
    enemy_spawn: tuple[int, int]
    focus_fire_range: int
    kite_range: int
    kite_self_hp_threshold: float
    kite_target_hp_threshold: float
    healer_approach_range: int
