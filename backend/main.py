"""
Solo Leveling Life System - FastAPI Backend
Quest, progression, streak and achievement endpoints
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from achievements import AchievementEvaluator, achievement_catalog, list_user_achievements
from config import get_config_summary, get_scheduler_config
from database import PostgresQuestStore, db, ensure_tables, seed_achievements
from exceptions import NotFound, QuestSystemError
from logger import logger
from models import (
    AchievementAward, AssignedQuest, CompletionResult, EarnedAchievement,
    GenerationResult, HealthStatus, InitializationResult, Notification,
    QuestType, Stat, StreakDetails, SweepReport, UserProgress, WeeklySweepReport,
)
from notifications import get_user_notifications
from progression import ProgressionEngine
from quests import QuestLifecycleManager
from scheduler import SweepScheduler
from store import QuestStore
from streaks import StreakTracker


# Background sweep runner, created on startup when enabled
sweep_scheduler: Optional[SweepScheduler] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    global sweep_scheduler

    # Startup
    load_dotenv()
    await db.connect()
    await ensure_tables()
    await seed_achievements()

    if get_scheduler_config().enabled:
        sweep_scheduler = SweepScheduler(QuestLifecycleManager(PostgresQuestStore(db)))
        await sweep_scheduler.start()

    logger.info("Server started")
    yield
    # Shutdown
    if sweep_scheduler:
        await sweep_scheduler.stop()
        sweep_scheduler = None
    logger.info("Server shutting down")
    await db.disconnect()


app = FastAPI(
    title="Solo Leveling Life System",
    description="Gamified quest, leveling and streak backend",
    version="1.0.0",
    lifespan=lifespan
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QuestSystemError)
async def quest_system_error_handler(request: Request, exc: QuestSystemError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ============================================
# DEPENDENCIES
# ============================================

def get_store() -> QuestStore:
    return PostgresQuestStore(db)


def get_lifecycle(store: QuestStore = Depends(get_store)) -> QuestLifecycleManager:
    return QuestLifecycleManager(store)


def get_progression(store: QuestStore = Depends(get_store)) -> ProgressionEngine:
    return ProgressionEngine(store)


# ============================================
# HEALTH & STATUS
# ============================================

@app.get("/health", response_model=HealthStatus)
async def health_check():
    """Check API and dependencies health."""
    return HealthStatus(
        status="healthy",
        database="connected" if db.is_connected else "disconnected",
        scheduler=sweep_scheduler.status if sweep_scheduler else "stopped",
    )


@app.get("/api/config")
async def get_config() -> Dict[str, Any]:
    """Current effective configuration."""
    return get_config_summary()


# ============================================
# QUESTS
# ============================================

@app.get("/api/users/{user_id}/quests/daily", response_model=List[AssignedQuest])
async def get_daily_quests(user_id: int, lifecycle: QuestLifecycleManager = Depends(get_lifecycle)):
    return await lifecycle.list_active_quests(user_id, QuestType.DAILY)


@app.get("/api/users/{user_id}/quests/weekly", response_model=List[AssignedQuest])
async def get_weekly_quests(user_id: int, lifecycle: QuestLifecycleManager = Depends(get_lifecycle)):
    return await lifecycle.list_active_quests(user_id, QuestType.WEEKLY)


@app.post("/api/users/{user_id}/quests/initialize", response_model=InitializationResult)
async def initialize_quests(user_id: int, lifecycle: QuestLifecycleManager = Depends(get_lifecycle)):
    """Set up stats and first quest batches for a new adventurer."""
    return await lifecycle.initialize_user(user_id)


@app.post("/api/users/{user_id}/quests/generate-daily", response_model=GenerationResult)
async def generate_daily_quests(user_id: int, lifecycle: QuestLifecycleManager = Depends(get_lifecycle)):
    return await lifecycle.generate(user_id, QuestType.DAILY)


@app.post("/api/users/{user_id}/quests/generate-weekly", response_model=GenerationResult)
async def generate_weekly_quests(user_id: int, lifecycle: QuestLifecycleManager = Depends(get_lifecycle)):
    return await lifecycle.generate(user_id, QuestType.WEEKLY)


@app.post("/api/users/{user_id}/quests/{quest_id}/complete", response_model=CompletionResult)
async def complete_quest(
    user_id: int,
    quest_id: int,
    engine: ProgressionEngine = Depends(get_progression)
):
    """Complete a quest and apply XP, level, stat, streak and achievement updates."""
    return await engine.complete_quest(user_id, quest_id)


# ============================================
# PROGRESS & STATS
# ============================================

@app.get("/api/users/{user_id}/progress", response_model=UserProgress)
async def get_progress(user_id: int, store: QuestStore = Depends(get_store)):
    progress = await store.get_user_progress(user_id)
    if progress is None:
        raise NotFound("Adventurer profile not found", {"user_id": user_id})
    return progress


@app.get("/api/users/{user_id}/stats", response_model=List[Stat])
async def get_stats(user_id: int, store: QuestStore = Depends(get_store)):
    return await store.get_stats(user_id)


@app.get("/api/users/{user_id}/streak", response_model=StreakDetails)
async def get_streak(user_id: int, store: QuestStore = Depends(get_store)):
    return await StreakTracker(store).get_streak_details(user_id)


@app.get("/api/users/{user_id}/notifications", response_model=List[Notification])
async def get_notifications(user_id: int, unread_only: bool = False, store: QuestStore = Depends(get_store)):
    return await get_user_notifications(store, user_id, unread_only)


# ============================================
# ACHIEVEMENTS
# ============================================

@app.get("/api/achievements")
async def get_achievement_catalog() -> List[Dict[str, Any]]:
    return achievement_catalog()


@app.get("/api/users/{user_id}/achievements", response_model=List[AchievementAward])
async def get_user_achievements(user_id: int, store: QuestStore = Depends(get_store)):
    return await list_user_achievements(store, user_id)


@app.post("/api/users/{user_id}/achievements/check", response_model=List[EarnedAchievement])
async def check_achievements(user_id: int, store: QuestStore = Depends(get_store)):
    """Re-evaluate achievements against the stored profile."""
    async with store.transaction():
        progress = await store.get_user_progress(user_id)
        if progress is None:
            raise NotFound("Adventurer profile not found", {"user_id": user_id})
        return await AchievementEvaluator(store).evaluate(
            user_id, progress.current_level, progress.total_exp, progress.streak_days
        )


# ============================================
# ADMIN SWEEPS
# ============================================

@app.post("/api/admin/sweeps/daily", response_model=SweepReport)
async def run_daily_sweep(lifecycle: QuestLifecycleManager = Depends(get_lifecycle)):
    """Run the nightly expire-and-renew sweep now."""
    return await lifecycle.expire_and_renew()


@app.post("/api/admin/sweeps/weekly", response_model=WeeklySweepReport)
async def run_weekly_sweep(lifecycle: QuestLifecycleManager = Depends(get_lifecycle)):
    """Run the weekly quest sweep now."""
    return await lifecycle.weekly_sweep()


# ============================================
# RUN SERVER
# ============================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
