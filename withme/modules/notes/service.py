import logging
from datetime import datetime, timezone
from supabase import Client
from withme.modules.notes.schemas import NoteCreate, NoteUpdate, NoteResponse, TagResponse
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def normalize_tag_names(names: List[str]) -> List[str]:
    """Trim, drop empties and de-duplicate while keeping first-seen order"""
    seen = []
    for name in names:
        cleaned = name.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


class NoteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_note(self, trip_id: str, note_id: str) -> dict:
        result = self.supabase.table("trip_notes")\
            .select("*")\
            .eq("id", note_id)\
            .eq("trip_id", trip_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Note not found")
        return result.data[0]

    def list_notes(self, trip_id: str) -> List[NoteResponse]:
        try:
            result = self.supabase.table("trip_notes")\
                .select("*")\
                .eq("trip_id", trip_id)\
                .order("created_at", desc=True)\
                .execute()
            return [NoteResponse(**n) for n in result.data]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing notes of trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch notes")

    def create_note(self, trip_id: str, note_data: NoteCreate, user_id: str) -> NoteResponse:
        try:
            result = self.supabase.table("trip_notes").insert({
                "trip_id": trip_id,
                "title": note_data.title,
                "content": note_data.content,
                "created_by": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create note")
            return NoteResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating note on trip {trip_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create note")

    def update_note(self, trip_id: str, note_id: str, note_data: NoteUpdate) -> NoteResponse:
        update_data = note_data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields provided for update")
        try:
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("trip_notes")\
                .update(update_data)\
                .eq("id", note_id)\
                .eq("trip_id", trip_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Note not found")
            return NoteResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating note {note_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update note")

    def delete_note(self, trip_id: str, note_id: str) -> bool:
        try:
            self.supabase.table("note_tags")\
                .delete()\
                .eq("note_id", note_id)\
                .execute()
            result = self.supabase.table("trip_notes")\
                .delete()\
                .eq("id", note_id)\
                .eq("trip_id", trip_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Note not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting note {note_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete note")

    def get_tags(self, note_id: str) -> List[TagResponse]:
        try:
            result = self.supabase.table("note_tags")\
                .select("tags(id, name)")\
                .eq("note_id", note_id)\
                .execute()
            return [TagResponse(**row["tags"]) for row in result.data or [] if row.get("tags")]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching tags of note {note_id}: {e}")
            raise HTTPException(status_code=500, detail="Error fetching note tags")

    def set_tags(self, note_id: str, names: List[str]) -> List[TagResponse]:
        """Replace a note's tags, creating tag rows that do not exist yet"""
        wanted = normalize_tag_names(names)
        try:
            tags: List[dict] = []
            if wanted:
                existing = self.supabase.table("tags")\
                    .select("id, name")\
                    .in_("name", wanted)\
                    .execute()
                tags = list(existing.data or [])
                known = {t["name"] for t in tags}
                missing = [name for name in wanted if name not in known]
                if missing:
                    inserted = self.supabase.table("tags")\
                        .insert([{"name": name} for name in missing])\
                        .execute()
                    if not inserted.data:
                        raise HTTPException(status_code=500, detail="Error creating new tags")
                    tags.extend(inserted.data)

            self.supabase.table("note_tags")\
                .delete()\
                .eq("note_id", note_id)\
                .execute()
            if tags:
                self.supabase.table("note_tags")\
                    .insert([{"note_id": note_id, "tag_id": t["id"]} for t in tags])\
                    .execute()

            order = {name: i for i, name in enumerate(wanted)}
            tags.sort(key=lambda t: order.get(t["name"], len(order)))
            return [TagResponse(id=t["id"], name=t["name"]) for t in tags]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating tags of note {note_id}: {e}")
            raise HTTPException(status_code=500, detail="Error processing tags")
