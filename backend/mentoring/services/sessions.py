from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict

from django.db import transaction
from django.utils import timezone

from core.errors import Forbidden, InvalidInput, NotFound, RateLimited
from mentoring.models import MentoringSession, MentoringSessionMentor, MentoringSessionUpdate

logger = logging.getLogger(__name__)

UPDATE_LIMIT = 2
UPDATE_WINDOW = timedelta(days=3)
MENTOR_EDITABLE_FIELDS = ("status", "meeting_link")


def recent_update_count(session: MentoringSession, mentor, *, now=None) -> int:
    now = now or timezone.now()
    return MentoringSessionUpdate.objects.filter(
        session=session,
        mentor=mentor,
        created_at__gte=now - UPDATE_WINDOW,
    ).count()


def update_session_by_mentor(session_id: int, mentor, updates: Dict[str, Any]) -> MentoringSession:
    """
    Apply a mentor's edit to a session they are assigned to.

    A mentor may edit a given session at most ``UPDATE_LIMIT`` times within a
    rolling ``UPDATE_WINDOW``; the count is re-read under the session row lock
    so two near-simultaneous edits cannot both pass it.
    """
    changes = {field: updates[field] for field in MENTOR_EDITABLE_FIELDS if field in updates}
    if not changes:
        raise InvalidInput("Provide status or meeting_link to update.")
    if "status" in changes and changes["status"] not in dict(MentoringSession.STATUSES):
        raise InvalidInput("Invalid session status.")

    with transaction.atomic():
        session = MentoringSession.objects.select_for_update().filter(pk=session_id).first()
        if session is None:
            raise NotFound("Mentoring session not found.")

        if not MentoringSessionMentor.objects.filter(session=session, mentor=mentor).exists():
            raise Forbidden("You are not assigned to this session.")

        if recent_update_count(session, mentor) >= UPDATE_LIMIT:
            raise RateLimited(
                f"You can only update this session {UPDATE_LIMIT} times within "
                f"{UPDATE_WINDOW.days} days."
            )

        for field, value in changes.items():
            setattr(session, field, value)
        session.save(update_fields=[*changes.keys(), "updated_at"])
        MentoringSessionUpdate.objects.create(session=session, mentor=mentor, changes=changes)

    logger.info("Mentor %s updated session %s: %s", mentor.pk, session.pk, sorted(changes))
    return session
