"""Status state machine helper shared by events, leads, bookings, tasks and timeline items"""

from fastapi import HTTPException


def can_transition(transitions: dict[str, list[str]], current: str, target: str) -> bool:
    return target in transitions.get(current, [])


def ensure_transition(transitions: dict[str, list[str]], current: str, target: str) -> None:
    """Raise 400 when target is not reachable from current"""
    if target not in transitions:
        raise HTTPException(status_code=400, detail=f"Unknown status '{target}'")
    if not can_transition(transitions, current, target):
        raise HTTPException(
            status_code=400, detail=f"Cannot transition from '{current}' to '{target}'"
        )
