import random
from functools import lru_cache
from typing import Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from pokearena.config import Config
from pokearena.errors import TrainerNotFoundError, ValidationError
from pokearena.models import Trainer, ChallengePolicy, ArenaKind, ChallengeResult, ArenaResult
from pokearena.repository import TrainerRepository
from pokearena.combat import resolve_challenge, run_arena

app = FastAPI(title="PokeArena Battle API")


class BattleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trainer1_id: int = Field(alias="trainer1Id")
    trainer2_id: int = Field(alias="trainer2Id")
    seed: Optional[int] = None


@lru_cache(maxsize=1)
def get_repository() -> TrainerRepository:
    repo = TrainerRepository(Config.DEFAULT_DATA_FILE)
    repo.load()
    return repo


def _load_pair(repo: TrainerRepository, req: BattleRequest) -> Tuple[Trainer, Trainer]:
    if req.trainer1_id == req.trainer2_id:
        raise HTTPException(status_code=400, detail="训练家不能与自己对战")
    try:
        return repo.get(req.trainer1_id), repo.get(req.trainer2_id)
    except TrainerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _challenge_response(label: str, result: ChallengeResult) -> dict:
    return {
        "battleType": label,
        "winner": result.winner.summary() if result.winner else None,
        "loser": result.loser.summary() if result.loser else None,
        "forfeit": result.forfeit,
        "totalRounds": result.rounds,
        "battleLog": result.log,
    }


def _arena_response(label: str, result: ArenaResult) -> dict:
    return {
        "battleType": label,
        "state": result.state.value,
        "winner": result.winner.summary() if result.winner else None,
        "roundsPlayed": result.rounds_played,
        "trainer1Wins": result.wins["a"],
        "trainer2Wins": result.wins["b"],
        "draws": result.draws,
        "stopped": result.stopped,
        "battleLog": result.log[-Config.API_LOG_TAIL:],
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/trainers")
def list_trainers(repo: TrainerRepository = Depends(get_repository)):
    return [t.model_dump(mode="json", by_alias=True) for t in repo.list()]


@app.get("/trainers/{trainer_id}")
def get_trainer(trainer_id: int, repo: TrainerRepository = Depends(get_repository)):
    try:
        return repo.get(trainer_id).model_dump(mode="json", by_alias=True)
    except TrainerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _run_challenge(req: BattleRequest, repo: TrainerRepository, policy: ChallengePolicy, label: str) -> dict:
    trainer1, trainer2 = _load_pair(repo, req)
    try:
        result = resolve_challenge(trainer1, trainer2, policy, rng=random.Random(req.seed))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    repo.save_all(trainer1, trainer2)
    return _challenge_response(label, result)


def _run_arena(req: BattleRequest, repo: TrainerRepository, kind: ArenaKind, label: str) -> dict:
    trainer1, trainer2 = _load_pair(repo, req)
    try:
        result = run_arena(trainer1, trainer2, kind, rng=random.Random(req.seed))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    repo.save_all(trainer1, trainer2)
    return _arena_response(label, result)


@app.post("/battles/random")
def random_battle(req: BattleRequest, repo: TrainerRepository = Depends(get_repository)):
    return _run_challenge(req, repo, ChallengePolicy.RANDOM, "随机挑战")


@app.post("/battles/deterministic")
def deterministic_battle(req: BattleRequest, repo: TrainerRepository = Depends(get_repository)):
    return _run_challenge(req, repo, ChallengePolicy.DETERMINISTIC, "确定性挑战")


@app.post("/battles/arena1")
def arena1(req: BattleRequest, repo: TrainerRepository = Depends(get_repository)):
    return _run_arena(req, repo, ArenaKind.ARENA_1, "竞技场 1")


@app.post("/battles/arena2")
def arena2(req: BattleRequest, repo: TrainerRepository = Depends(get_repository)):
    return _run_arena(req, repo, ArenaKind.ARENA_2, "竞技场 2")


if __name__ == "__main__":
    import uvicorn  # type: ignore
    uvicorn.run(app, host="0.0.0.0", port=8000)
