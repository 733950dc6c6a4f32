import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from backend.roll_tracker import RollTracker
from backend.settings import load_settings
from backend.utils.storage import SqlFlagStore, get_player_name, upsert_player
from routes.schemas.roll_tracker import (
    RollEventSchema,
    SaveRollResponse,
    RollStatsResponse,
    ComparisonResponse,
    RollRecordSchema,
)

logger = logging.getLogger(__name__)

roll_tracker_blp = APIRouter(prefix="/rolls", tags=["Roll Tracker"])
comparison_blp = APIRouter(prefix="/comparison", tags=["Roll Tracker"])


def get_tracker() -> RollTracker:
    return RollTracker(SqlFlagStore(), load_settings(), names=get_player_name)


@comparison_blp.get("/rolls", response_model=ComparisonResponse)
def general_comparison(tracker: RollTracker = Depends(get_tracker)):
    return tracker.general_comparison()


@roll_tracker_blp.post("/{user_id}", response_model=SaveRollResponse)
def save_tracked_roll(user_id: str, event: RollEventSchema, tracker: RollTracker = Depends(get_tracker)):
    record = tracker.save_tracked_roll(user_id, event.model_dump())
    if record is not None and event.username:
        upsert_player(user_id, event.username, event.is_gm)
    return {"tracked": record is not None, "record": record}


@roll_tracker_blp.get("/{user_id}", response_model=list[RollRecordSchema])
def replay_rolls(user_id: str, tracker: RollTracker = Depends(get_tracker)):
    return tracker.get_rolls(user_id)


@roll_tracker_blp.get("/{user_id}/stats", response_model=RollStatsResponse)
def prepare_roll_stats(user_id: str, tracker: RollTracker = Depends(get_tracker)):
    data = tracker.prepare_roll_stats(user_id)
    data["mode_display"] = ", ".join(str(m) for m in data["stats"]["mode"])
    return data


@roll_tracker_blp.get("/{user_id}/export", response_class=PlainTextResponse)
def export_rolls(user_id: str, tracker: RollTracker = Depends(get_tracker)):
    content = tracker.export_data(user_id)
    if not content:
        raise HTTPException(status_code=404, detail="No roll data to export")
    return PlainTextResponse(
        content,
        headers={"Content-Disposition": 'attachment; filename="roll-data.txt"'},
    )


@roll_tracker_blp.delete("/{user_id}")
def clear_tracked_rolls(user_id: str, tracker: RollTracker = Depends(get_tracker)):
    tracker.clear_tracked_rolls(user_id)
    return {"status": "cleared", "user_id": user_id}
