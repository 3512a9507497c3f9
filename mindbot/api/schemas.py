from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List

# message/messages stay loosely typed: structural checks happen in the
# decision pipeline so that malformed payloads get its error texts.
class ChatRequest(BaseModel):
    message: Optional[Any] = None
    messages: Optional[Any] = None
    caseType: Optional[Any] = "general"
    isPremium: bool = False
    isWorkshop: Optional[bool] = None
    isToolkit: bool = False
    isVent: bool = False
    targetGroup: Optional[str] = "general"
    lang: Optional[str] = None
    language: Optional[str] = None

class VentRequest(BaseModel):
    text: Optional[Any] = None
    lang: Optional[str] = None
    sessionId: Optional[str] = None

class ToolkitRequest(BaseModel):
    mood: str = ""
    userWork: str = ""
    lang: str = "th"

class BookingCreate(BaseModel):
    psychologistId: str
    clientName: Optional[str] = None
    clientPhone: str
    clientEmail: Optional[str] = None
    scheduledDate: str  # YYYY-MM-DD
    scheduledTime: str  # HH:MM
    sessionType: Optional[str] = "video"
    notes: Optional[str] = None

class BookingOut(BaseModel):
    bookingRef: str
    psychologistId: str
    clientName: str
    clientPhone: str
    clientEmail: Optional[str] = None
    scheduledDate: str
    scheduledTime: str
    sessionType: str
    duration: int
    amount: int
    platformFee: int
    psychologistEarning: int
    notes: Optional[str] = None
    status: str
    rating: Optional[int] = None
    createdAt: str

class CancelRequest(BaseModel):
    reason: Optional[str] = None

class RateRequest(BaseModel):
    rating: int
    feedback: Optional[str] = None

class ListenerRegister(BaseModel):
    nickname: str = Field(min_length=1, max_length=100)
    phone: str
    email: Optional[str] = None
    age: Optional[int] = None
    motivation: Optional[str] = None

class OtpVerify(BaseModel):
    phone: str
    otp: str

class OtpResend(BaseModel):
    phone: str

class ListenerOut(BaseModel):
    id: str
    nickname: str
    avatarUrl: str
    status: str
    isOnline: bool = False
    isAvailable: bool = False

class ListenerStatusPatch(BaseModel):
    isOnline: Optional[bool] = None
    isAvailable: Optional[bool] = None

class SchoolInfo(BaseModel):
    schoolName: str = Field(min_length=1)
    province: str = ""
    affiliation: str = ""
    studentCount: int = 0
    level: str = ""
    respondent: str = ""

class DomainScore(BaseModel):
    id: str
    nameTH: str
    percentage: float

class OverallLevel(BaseModel):
    level: str = "Unknown"

class AssessmentScores(BaseModel):
    totalPercentage: float
    overallLevel: Optional[OverallLevel] = None
    domainScores: Dict[str, DomainScore] = {}

class LeadCapture(BaseModel):
    schoolInfo: SchoolInfo
    scores: AssessmentScores
    contactInfo: Optional[Dict[str, Any]] = None

class MatchRequest(BaseModel):
    sessionId: str = Field(min_length=1)
    nickname: Optional[str] = "Anonymous"

class RoomMessageIn(BaseModel):
    sessionId: str = Field(min_length=1)
    roomId: str
    message: Optional[Any] = None

class RoomMessageOut(BaseModel):
    id: str
    senderSessionId: str
    text: str
    createdAt: str

class LeaveRequest(BaseModel):
    sessionId: str = Field(min_length=1)

class TherapistApply(BaseModel):
    prefix: Optional[str] = None
    fullname: Optional[str] = None
    nickname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    line_id: Optional[str] = None
    position: Optional[str] = None
    work_type: Optional[str] = None
    education: Optional[str] = None
    license_number: Optional[str] = None
    experience_hours: Optional[Any] = None
    experience_years: Optional[Any] = None
    specializations: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    work_history: Optional[str] = None
    motivation: Optional[str] = None

class PsychoeducationRequest(BaseModel):
    action: Optional[str] = None
    lang: Optional[str] = None
    volumeId: Optional[str] = None
    text: Optional[Any] = None
    message: Optional[Any] = None
