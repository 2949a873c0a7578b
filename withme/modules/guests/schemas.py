from pydantic import BaseModel
from typing import Optional, Dict


class GuestClaimRequest(BaseModel):
    guest_token: Optional[str] = None


class GuestClaimResponse(BaseModel):
    guest_user_id: str
    user_id: str
    updated: Dict[str, int]
