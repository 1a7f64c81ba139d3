"""
Hit endpoints of the statistics service.

Provides:
- POST /hit: record one request
- GET /stats: hit counts per (app, uri) over a time window
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from stats.src.db.database import get_db
from stats.src.schemas.hit import DATE_FORMAT, HitCreate, ViewStats
from stats.src.services.hit_service import HitService


router = APIRouter(tags=["Hits"])


def get_hit_service(db: Session = Depends(get_db)) -> HitService:
    return HitService(db)


def _parse(value: str, name: str) -> datetime:
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name} '{value}': expected format YYYY-MM-DD HH:MM:SS",
        )


@router.post(
    "/hit",
    status_code=status.HTTP_201_CREATED,
    summary="Record a hit",
)
def add_hit(
    hit: HitCreate,
    hit_service: HitService = Depends(get_hit_service),
) -> Response:
    hit_service.add_hit(hit)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get(
    "/stats",
    response_model=List[ViewStats],
    summary="Get hit counts",
)
def get_stats(
    start: str = Query(...),
    end: str = Query(...),
    uris: Optional[List[str]] = Query(None),
    unique: bool = Query(False),
    hit_service: HitService = Depends(get_hit_service),
) -> List[ViewStats]:
    """
    Hit counts per (app, uri) between start and end, inclusive.

    Example:
        GET /stats?start=2026-01-01 00:00:00&end=2026-12-31 23:59:59&uris=/events/1&unique=true
    """
    return hit_service.get_stats(
        _parse(start, "start"),
        _parse(end, "end"),
        uris=uris,
        unique=unique,
    )
