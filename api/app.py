"""HTTP API entrypoint for driving a tag simulation from a web UI or script."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from env.core.errors import InvalidConfiguration
from env.scenario import Scenario
from game_runner import Simulation
from infra.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Tag simulation")
simulation: Simulation | None = None

# Allow the browser-based control panel (served from file:// or other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class StartRequest(BaseModel):
    """Either a full scenario dict or just the two counts."""
    scenario: dict | None = None
    player_count: int | None = Field(default=None, description="Defaults to 5")
    step_count: int | None = Field(default=None, description="Defaults to 100")
    world: dict | None = None


class RunRequest(BaseModel):
    max_steps: int | None = Field(default=None, ge=1)
    include_history: bool = False


def _require_simulation() -> Simulation:
    if simulation is None:
        raise HTTPException(400, "No active simulation")
    return simulation


@app.post("/start")
def start(request: StartRequest):
    global simulation
    try:
        if request.scenario is not None:
            scenario = Scenario.from_dict(request.scenario)
        else:
            scenario = Scenario.from_counts(request.player_count, request.step_count)
        simulation = Simulation(scenario, world=request.world)
    except (InvalidConfiguration, ValueError) as exc:
        raise HTTPException(400, str(exc)) from exc

    logger.info("API started %s", scenario)
    return {
        "success": True,
        "scenario": scenario.to_dict(),
        "frame": simulation.get_initial_frame().to_dict(),
    }


@app.post("/step")
def step():
    sim = _require_simulation()
    try:
        return sim.step().to_dict()
    except RuntimeError as exc:
        raise HTTPException(400, str(exc)) from exc


@app.post("/run")
def run(request: RunRequest):
    sim = _require_simulation()
    if sim.done:
        raise HTTPException(400, "Simulation is already finished")

    frames = []
    while not sim.done and (request.max_steps is None or len(frames) < request.max_steps):
        frames.append(sim.step())

    payload = {"steps_run": len(frames), "final": frames[-1].to_dict()}
    if request.include_history:
        payload["frames"] = [f.to_dict() for f in frames]
    return payload


@app.get("/status")
def status():
    if simulation is None:
        return {"active": False}
    return {
        "active": True,
        "phase": simulation.phase.value,
        "step": simulation.step_number,
        "step_count": simulation.step_count,
        "done": simulation.done,
        "it": simulation.env.world.get_it().id,
    }
