from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, Literal
from datetime import datetime

FormStatus = Literal["draft", "published", "archived"]
FormVisibility = Literal["private", "members", "public"]
FormType = Literal["general", "accommodation", "transportation", "activities", "food", "feedback", "custom"]


class FormCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: FormStatus = "draft"
    visibility: FormVisibility = "members"
    form_type: FormType = "general"
    allow_anonymous: bool = False
    expires_at: Optional[datetime] = None
    metadata: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None


class FormResponse(BaseModel):
    id: str
    trip_id: Optional[str] = None
    created_by: Optional[str] = None
    title: str
    description: Optional[str] = None
    status: str
    visibility: str
    form_type: str = "general"
    allow_anonymous: bool = False
    expires_at: Optional[datetime] = None
    metadata: Optional[Dict[str, Any]] = None
    settings: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FormAnswerSubmit(BaseModel):
    answers: Dict[str, Any]


class FormAnswerResponse(BaseModel):
    id: str
    form_id: str
    user_id: Optional[str] = None
    answers: Dict[str, Any]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
