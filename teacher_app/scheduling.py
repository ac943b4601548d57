"""
Session booking: room/time conflict detection and room availability.
"""
import logging
from collections import defaultdict

from .exceptions import ConflictError, NotFoundError
from .store import DjangoStore
from .timeslots import TimeSlot, parse_day, parse_id

logger = logging.getLogger(__name__)


def has_conflict(room_id, day, slot, store=None):
    """True when any session of the room on that day overlaps the slot."""
    store = store or DjangoStore()
    return any(
        TimeSlot.of(existing).overlaps(slot)
        for existing in store.find_sessions_by_room_and_date(room_id, day)
    )


def create_session(*, group_id, room_id, teacher_id, day, start_time, end_time, store=None):
    """
    Book a room for a group. Input is validated before the store is touched;
    the conflict check and the insert run under the (room, date) booking lock
    so two overlapping requests cannot both succeed.
    """
    store = store or DjangoStore()
    group_id = parse_id(group_id, "groupId")
    room_id = parse_id(room_id, "roomId")
    day = parse_day(day)
    slot = TimeSlot.parse(start_time, end_time)

    if store.find_room(room_id) is None:
        raise NotFoundError("Room not found")
    if store.find_group(group_id) is None:
        raise NotFoundError("Group not found")

    with store.booking_lock(room_id, day):
        if has_conflict(room_id, day, slot, store):
            logger.warning(
                f"Booking rejected: room {room_id} on {day} {slot.start_time}-{slot.end_time} overlaps"
            )
            raise ConflictError("Room is already booked for this time slot")
        session = store.insert_session(
            day=day,
            start_time=slot.start_time,
            end_time=slot.end_time,
            group_id=group_id,
            teacher_id=teacher_id,
            room_id=room_id,
        )

    logger.info(f"Session {session.id} booked: room {room_id} on {day} {slot.start_time}-{slot.end_time}")
    return session


def available_rooms(day=None, start_time=None, end_time=None, store=None):
    """
    Rooms free for the whole interval on that day.
    Without a complete (day, start, end) triple every room is returned.
    """
    store = store or DjangoStore()
    rooms = store.list_rooms()
    if not day or not start_time or not end_time:
        return rooms

    day = parse_day(day)
    slot = TimeSlot.parse(start_time, end_time)

    booked = defaultdict(list)
    for session in store.find_sessions_by_date(day):
        booked[session.room_id].append(TimeSlot.of(session))

    return [
        room for room in rooms
        if not any(existing.overlaps(slot) for existing in booked[room.id])
    ]
