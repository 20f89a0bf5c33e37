"""
Energy packets in flight.

An EMEnergyPacket is a plain record; the orchestrator (LayersModel) owns the
live collection and is the only code that moves packets or changes their
energy. Packets compare by identity, so a list of packets has set semantics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WavelengthBand(Enum):
    VISIBLE = "visible"
    INFRARED = "infrared"


class EnergyDirection(Enum):
    UP = 1
    DOWN = -1


@dataclass(eq=False)
class EMEnergyPacket:
    band: WavelengthBand
    energy: float  # J, never negative
    altitude: float  # m
    direction: EnergyDirection
    emitted_by: int | None = None  # index of the layer that just emitted it
    previous_altitude: float | None = None  # altitude before the last advance

    def __post_init__(self) -> None:
        if self.previous_altitude is None:
            self.previous_altitude = self.altitude

    @property
    def moving_up(self) -> bool:
        return self.direction is EnergyDirection.UP

    def advance(self, distance: float) -> None:
        """Move by `distance` metres along the packet's direction."""
        self.previous_altitude = self.altitude
        self.altitude += self.direction.value * distance


__all__ = ["WavelengthBand", "EnergyDirection", "EMEnergyPacket"]
