import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...core.db import get_db
from ...models import ChatQueueEntry, ChatRoom, RoomMessage
from ...conversation.normalizer import normalize_text
from ..schemas import LeaveRequest, MatchRequest, RoomMessageIn, RoomMessageOut

log = logging.getLogger("mindbot.private_chat")

router = APIRouter(prefix="/api/private-chat", tags=["private-chat"])

HISTORY_LIMIT = 100

def _iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat() + "Z"

def _member(room: ChatRoom, session_id: str) -> bool:
    return session_id in (room.host_session_id, room.guest_session_id)

def _get_room(db: Session, room_id: str) -> ChatRoom:
    room = db.query(ChatRoom).filter(ChatRoom.id == room_id).first()
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room

@router.post("/match")
def find_match(payload: MatchRequest, db: Session = Depends(get_db)):
    nickname = payload.nickname or "Anonymous"
    peer = (
        db.query(ChatQueueEntry)
        .filter(ChatQueueEntry.status == "waiting", ChatQueueEntry.session_id != payload.sessionId)
        .order_by(ChatQueueEntry.created_at.asc())
        .first()
    )
    if peer:
        room = ChatRoom(
            host_session_id=peer.session_id,
            host_nickname=peer.nickname,
            guest_session_id=payload.sessionId,
            guest_nickname=nickname,
        )
        db.add(room)
        db.flush()
        peer.status = "matched"
        peer.room_id = room.id
        # the caller may have queued earlier from another tab
        db.query(ChatQueueEntry).filter(
            ChatQueueEntry.session_id == payload.sessionId, ChatQueueEntry.status == "waiting"
        ).update({"status": "matched", "room_id": room.id})
        db.commit()
        log.info("private chat matched room=%s", room.id)
        return {
            "matched": True,
            "roomId": room.id,
            "partnerId": peer.session_id,
            "partnerNickname": peer.nickname,
            "message": "พบคู่สนทนาแล้ว! เริ่มพูดคุยได้เลย",
        }

    waiting = (
        db.query(ChatQueueEntry)
        .filter(ChatQueueEntry.session_id == payload.sessionId, ChatQueueEntry.status == "waiting")
        .first()
    )
    if not waiting:
        db.add(ChatQueueEntry(session_id=payload.sessionId, nickname=nickname, role="seeker"))
        db.commit()
    return {
        "matched": False,
        "sessionId": payload.sessionId,
        "message": "กำลังหาคู่สนทนา... กรุณารอสักครู่",
    }

@router.post("/messages")
def send_message(payload: RoomMessageIn, db: Session = Depends(get_db)):
    checked = normalize_text(payload.message)
    if not checked.valid:
        raise HTTPException(status_code=400, detail="Message is required")
    room = _get_room(db, payload.roomId)
    if not _member(room, payload.sessionId):
        raise HTTPException(status_code=403, detail="Not a member of this room")
    if room.status != "active":
        raise HTTPException(status_code=409, detail="Room is closed")
    msg = RoomMessage(room_id=room.id, sender_session_id=payload.sessionId, text=checked.text)
    db.add(msg)
    db.commit()
    db.refresh(msg)
    return {"success": True, "messageId": msg.id, "timestamp": _iso(msg.created_at)}

@router.get("/rooms/{room_id}/messages")
def history(room_id: str, sessionId: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    room = _get_room(db, room_id)
    if not _member(room, sessionId):
        raise HTTPException(status_code=403, detail="Not a member of this room")
    rows = (
        db.query(RoomMessage)
        .filter(RoomMessage.room_id == room.id)
        .order_by(RoomMessage.created_at.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )
    rows.reverse()
    return {
        "success": True,
        "roomStatus": room.status,
        "messages": [
            RoomMessageOut(id=m.id, senderSessionId=m.sender_session_id, text=m.text, createdAt=_iso(m.created_at))
            for m in rows
        ],
    }

@router.post("/rooms/{room_id}/leave")
def leave_room(room_id: str, payload: LeaveRequest, db: Session = Depends(get_db)):
    room = _get_room(db, room_id)
    if not _member(room, payload.sessionId):
        raise HTTPException(status_code=403, detail="Not a member of this room")
    if room.status == "active":
        room.status = "closed"
        room.closed_at = datetime.utcnow()
    db.query(ChatQueueEntry).filter(
        ChatQueueEntry.session_id == payload.sessionId, ChatQueueEntry.status == "waiting"
    ).update({"status": "left"})
    db.commit()
    return {"success": True, "message": "ออกจากห้องแชทแล้ว"}
