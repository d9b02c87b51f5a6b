# services/journal.py

import logging
from typing import Any, Dict, List, Optional

from dearself.models.enums import Mood, Table
from dearself.models.journal import JournalEntry
from dearself.services.base import Panel
from dearself.utils.validators import MAX_TITLE_LENGTH, require_date, require_mood, require_text

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 300

def word_count(text: str) -> int:
    return len(text.split())

def preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    if len(text) > length:
        return f"{text[:length]}..."
    return text

class JournalPanel(Panel):
    """Dated journal entries tagged with a mood"""

    name = "journal"

    def clear(self) -> None:
        self.entries: List[JournalEntry] = []

    def _load(self, user_id: str) -> None:
        rows = (
            self.store.table(Table.JOURNAL_ENTRIES)
            .select("*")
            .eq("user_id", user_id)
            .order("date", desc=True)
            .execute()
        )
        self.entries = [JournalEntry.from_dict(row) for row in rows]

    def _validated(self, title: str, content: str, mood: str, entry_date: Optional[str]) -> Dict[str, Any]:
        return {
            "title": require_text(title, "title", MAX_TITLE_LENGTH),
            "content": require_text(content, "content"),
            "mood": require_mood(mood).value,
            "date": require_date(entry_date or self.today()),
        }

    def create(self, title: str, content: str, mood: str = Mood.NEUTRAL.value,
               entry_date: Optional[str] = None) -> bool:
        fields = self._validated(title, content, mood, entry_date)
        return self._mutate(
            "saving journal entry",
            lambda user_id: self.store.table(Table.JOURNAL_ENTRIES).insert({**fields, "user_id": user_id}),
        )

    def update(self, entry_id: str, title: str, content: str, mood: str = Mood.NEUTRAL.value,
               entry_date: Optional[str] = None) -> bool:
        fields = self._validated(title, content, mood, entry_date)

        def write(user_id):
            self._require_owned(Table.JOURNAL_ENTRIES, entry_id, user_id)
            self.store.table(Table.JOURNAL_ENTRIES).update(entry_id, fields)

        return self._mutate("updating journal entry", write)

    def delete(self, entry_id: str, confirmed: bool = False) -> bool:
        self._require_confirmation(confirmed, "a journal entry")

        def write(user_id):
            self._require_owned(Table.JOURNAL_ENTRIES, entry_id, user_id)
            self.store.table(Table.JOURNAL_ENTRIES).delete(entry_id)

        return self._mutate("deleting journal entry", write)

    def filtered(self, search: str = "", mood: Optional[str] = None) -> List[JournalEntry]:
        """Case-insensitive match on title or content, optional mood filter"""
        needle = (search or "").lower()
        return [
            entry for entry in self.entries
            if (needle in entry.title.lower() or needle in entry.content.lower())
            and (not mood or entry.mood.value == mood)
        ]

    def view(self, search: str = "", mood: Optional[str] = None) -> Dict[str, Any]:
        entries = []
        for entry in self.filtered(search, mood):
            data = entry.to_dict()
            data["word_count"] = word_count(entry.content)
            data["preview"] = preview(entry.content)
            entries.append(data)
        return {
            "entries": entries,
            "total_count": len(self.entries),
            "today_count": sum(1 for entry in self.entries if entry.date == self.today()),
        }
