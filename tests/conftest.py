from __future__ import annotations

import pytest

from agri_sim.economy.ledger import PlayerLedger
from agri_sim.economy.market import MarketEngine
from agri_sim.simulation.engine import FarmGame
from agri_sim.simulation.events import EventSystem, build_catalog
from agri_sim.simulation.turn import SimulationContext
from agri_sim.viz.logger import SimLogger
from agri_sim.world.grid import FarmGrid


class FixedRandom:
    """Replays scripted draws, then falls back to a constant."""

    def __init__(self, values=(), default: float = 0.5) -> None:
        self._values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self.default


def make_event(event_id: str = "test_event", probability: float = 1.0, kind: str = "TEST", **effects):
    return build_catalog([{
        "id": event_id,
        "type": kind,
        "name": event_id.replace("_", " ").title(),
        "description": "",
        "probability": probability,
        "effects": effects,
    }])[0]


@pytest.fixture
def quiet_logger() -> SimLogger:
    return SimLogger(verbosity=-1, stdout=False)


@pytest.fixture
def rng() -> FixedRandom:
    return FixedRandom()


@pytest.fixture
def make_game(quiet_logger):
    """Build an initialized game with a scripted RNG and a chosen catalog."""

    def _make(catalog=(), rng=None) -> FarmGame:
        game = FarmGame(catalog=list(catalog), rng=rng or FixedRandom(), logger=quiet_logger)
        game.initialize()
        return game

    return _make


@pytest.fixture
def context(rng) -> SimulationContext:
    return SimulationContext(
        grid=FarmGrid(5),
        ledger=PlayerLedger(),
        market=MarketEngine(rng),
        events=EventSystem(rng, []),
    )
