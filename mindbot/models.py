import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Boolean, ForeignKey, Text, Integer, Float, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .core.db import Base

def _uuid() -> str:
    return str(uuid.uuid4())

class VentPost(Base):
    __tablename__ = "vent_posts"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    session_id: Mapped[str] = mapped_column(String(80), index=True)
    text: Mapped[str] = mapped_column(Text)
    language: Mapped[str] = mapped_column(String(4), default="th")
    risk: Mapped[str] = mapped_column(String(10), default="unknown")  # none/low/medium/high/unknown
    tags_json: Mapped[str] = mapped_column(Text, default="[]")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

class Psychologist(Base):
    __tablename__ = "psychologists"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(200))
    title: Mapped[str] = mapped_column(String(200))
    license_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    education: Mapped[str | None] = mapped_column(String(300), nullable=True)
    specialties_json: Mapped[str] = mapped_column(Text, default="[]")
    languages_json: Mapped[str] = mapped_column(Text, default="[]")
    experience: Mapped[str] = mapped_column(String(40), default="")
    rating: Mapped[float] = mapped_column(Float, default=0.0)
    total_reviews: Mapped[int] = mapped_column(Integer, default=0)
    rate_per_session: Mapped[int] = mapped_column(Integer)  # THB
    session_duration: Mapped[int] = mapped_column(Integer, default=50)  # minutes
    is_online: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    bookings: Mapped[list["Booking"]] = relationship(back_populates="psychologist", cascade="all, delete-orphan")

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_slot", "psychologist_id", "scheduled_date", "scheduled_time"),
    )
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    booking_ref: Mapped[str] = mapped_column(String(20), unique=True, index=True)  # APT-YYYYMMDD-XXXX
    psychologist_id: Mapped[str] = mapped_column(String(36), ForeignKey("psychologists.id", ondelete="CASCADE"), index=True)
    client_name: Mapped[str] = mapped_column(String(200), default="Anonymous")
    client_phone: Mapped[str] = mapped_column(String(10), index=True)
    client_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    scheduled_date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    scheduled_time: Mapped[str] = mapped_column(String(5))  # HH:MM
    session_type: Mapped[str] = mapped_column(String(10), default="video")  # video/chat
    duration: Mapped[int] = mapped_column(Integer, default=50)
    amount: Mapped[int] = mapped_column(Integer)
    platform_fee: Mapped[int] = mapped_column(Integer)
    psychologist_earning: Mapped[int] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # pending_payment -> confirmed -> completed, or cancelled
    status: Mapped[str] = mapped_column(String(20), default="pending_payment")
    cancel_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    psychologist: Mapped["Psychologist"] = relationship(back_populates="bookings")

class Listener(Base):
    __tablename__ = "listeners"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    nickname: Mapped[str] = mapped_column(String(100))
    phone: Mapped[str] = mapped_column(String(10), unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    motivation: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_seed: Mapped[str] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending/active
    phone_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    otp_hash: Mapped[str | None] = mapped_column(String(300), nullable=True)
    otp_expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    otp_attempts: Mapped[int] = mapped_column(Integer, default=0)
    is_online: Mapped[bool] = mapped_column(Boolean, default=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=False)
    total_chats: Mapped[int] = mapped_column(Integer, default=0)
    total_minutes: Mapped[int] = mapped_column(Integer, default=0)
    avg_rating: Mapped[float] = mapped_column(Float, default=0.0)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

class Lead(Base):
    __tablename__ = "leads"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    status: Mapped[str] = mapped_column(String(20), default="new")
    source: Mapped[str] = mapped_column(String(40), default="smhqa_assessment")
    school_name: Mapped[str] = mapped_column(String(300))
    province: Mapped[str] = mapped_column(String(100), default="")
    affiliation: Mapped[str] = mapped_column(String(200), default="")
    student_count: Mapped[int] = mapped_column(Integer, default=0)
    school_level: Mapped[str] = mapped_column(String(100), default="")
    respondent: Mapped[str] = mapped_column(String(200), default="")
    contact_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_score: Mapped[float] = mapped_column(Float, default=0.0)
    assessment_level: Mapped[str] = mapped_column(String(40), default="Unknown")
    weak_domains_json: Mapped[str] = mapped_column(Text, default="[]")
    pitch_message: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

class ChatQueueEntry(Base):
    __tablename__ = "private_chat_queue"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    session_id: Mapped[str] = mapped_column(String(80), index=True)
    nickname: Mapped[str] = mapped_column(String(100), default="Anonymous")
    role: Mapped[str] = mapped_column(String(20), default="seeker")
    status: Mapped[str] = mapped_column(String(20), default="waiting", index=True)  # waiting/matched/left
    room_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

class ChatRoom(Base):
    __tablename__ = "private_chat_rooms"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    host_session_id: Mapped[str] = mapped_column(String(80))
    host_nickname: Mapped[str] = mapped_column(String(100), default="Anonymous")
    guest_session_id: Mapped[str | None] = mapped_column(String(80), nullable=True)
    guest_nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")  # active/closed
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    closed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    messages: Mapped[list["RoomMessage"]] = relationship(back_populates="room", cascade="all, delete-orphan")

class RoomMessage(Base):
    __tablename__ = "private_chat_messages"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    room_id: Mapped[str] = mapped_column(String(36), ForeignKey("private_chat_rooms.id", ondelete="CASCADE"), index=True)
    sender_session_id: Mapped[str] = mapped_column(String(80))
    text: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    room: Mapped["ChatRoom"] = relationship(back_populates="messages")

class TherapistApplication(Base):
    __tablename__ = "therapist_applications"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    ref_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    fullname: Mapped[str] = mapped_column(String(200))
    nickname: Mapped[str] = mapped_column(String(100), default="")
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(10), unique=True, index=True)
    line_id: Mapped[str] = mapped_column(String(100), default="")
    position: Mapped[str] = mapped_column(String(40))
    work_type: Mapped[str] = mapped_column(String(20), default="parttime")
    education: Mapped[str] = mapped_column(String(300))
    license_number: Mapped[str] = mapped_column(String(40), default="")
    experience_hours: Mapped[str] = mapped_column(String(20))
    experience_years: Mapped[str] = mapped_column(String(20), default="")
    specializations_json: Mapped[str] = mapped_column(Text, default="[]")
    languages_json: Mapped[str] = mapped_column(Text, default='["thai"]')
    work_history: Mapped[str] = mapped_column(Text, default="")
    motivation: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending/approved/rejected
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
