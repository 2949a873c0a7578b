import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.forms.schemas import (
    FormCreate, FormResponse, FormAnswerResponse
)
from withme.config.trip_roles import READ_ROLES
from withme.core.dependencies import get_trip_role
from typing import List, Optional, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def is_expired(form: FormResponse, now: Optional[datetime] = None) -> bool:
    if form.expires_at is None:
        return False
    expires_at = form.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= (now or datetime.now(timezone.utc))


class FormService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_form(self, form_id: str) -> FormResponse:
        try:
            result = self.supabase.table("forms")\
                .select("*")\
                .eq("id", form_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Form not found")
            return FormResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching form {form_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch form")

    def list_forms(self, trip_id: str) -> List[FormResponse]:
        try:
            result = self.supabase.table("forms")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .order("created_at", desc=True)\
                .execute()
            return [FormResponse(**f) for f in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing forms of trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch forms")

    def create_form(self, trip_id: str, form_data: FormCreate, user_id: str) -> FormResponse:
        try:
            result = self.supabase.table("forms").insert({
                **form_data.model_dump(mode="json"),
                "trip_id": trip_id,
                "created_by": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create form")
            logger.info(f"Form {result.data[0]['id']} created on trip {trip_id}")
            return FormResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating form on trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create form")

    def check_can_view(self, form: FormResponse, user_data: Optional[Dict[str, Any]]):
        """Public forms are open; members forms need a trip role; private forms are creator-only"""
        user_id = user_data["id"] if user_data else None
        if form.visibility == "public" or (user_id and form.created_by == user_id):
            return
        if form.visibility == "members" and form.trip_id:
            role = get_trip_role(form.trip_id, user_id, self.supabase)
            if role in READ_ROLES:
                return
        raise HTTPException(status_code=403, detail="Access denied")

    def submit_response(
        self,
        form_id: str,
        answers: Dict[str, Any],
        user_data: Optional[Dict[str, Any]]
    ) -> FormAnswerResponse:
        form = self.get_form(form_id)
        if form.status != "published":
            raise HTTPException(status_code=400, detail="Form is not accepting responses")
        if is_expired(form):
            raise HTTPException(status_code=400, detail="Form has expired")
        if user_data is None and not form.allow_anonymous:
            raise HTTPException(status_code=401, detail="Not authenticated")

        try:
            result = self.supabase.table("form_responses").insert({
                "form_id": form_id,
                "user_id": user_data["id"] if user_data else None,
                "answers": answers,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to submit response")
            return FormAnswerResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error submitting response to form {form_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to submit response")
