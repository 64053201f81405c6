"""Dialog session data models."""

from dataclasses import dataclass, field

from .query import Query, QueryKind


@dataclass
class QueryRecord:
    """A query that was asked, together with the user's answer so far."""

    query: Query
    text_response: str | None = None
    choice_selections: set[int] = field(default_factory=set)
    correlation_message_id: int | None = None  # id of the answering message


@dataclass
class DialogSession:
    """Persistent state of one in-progress dialog for a (user, chat) pair."""

    user_id: int
    chat_id: int
    dialog_name: str
    is_private: bool = True
    username: str | None = None
    pending_query_name: str | None = None
    queries: dict[str, QueryRecord] = field(default_factory=dict)

    def query(self, name: str) -> Query | None:
        record = self.queries.get(name)
        return record.query if record else None

    def record(self, name: str) -> QueryRecord | None:
        return self.queries.get(name)

    def pending_query(self) -> Query | None:
        """The query awaiting an answer, or None before the first one is sent."""
        if self.pending_query_name is None:
            return None
        return self.query(self.pending_query_name)

    def pending_record(self) -> QueryRecord | None:
        if self.pending_query_name is None:
            return None
        return self.queries.get(self.pending_query_name)

    def response_for(self, name: str) -> tuple[str | None, bool]:
        """Text (or file reference) answer of a text/file query."""
        record = self.queries.get(name)
        if record is None or not record.query.kind.has_text_response:
            return None, False
        if record.text_response is None:
            return None, False
        return record.text_response, True

    def choices_for(self, name: str) -> tuple[set[int], bool]:
        """Selected choice indexes of a choice query."""
        record = self.queries.get(name)
        if record is None or not record.query.kind.has_choice_response:
            return set(), False
        return set(record.choice_selections), True

    def record_text_response(
        self, text: str, correlation_message_id: int | None = None
    ) -> None:
        """Store the answer to the pending text/file query."""
        record = self._require_pending()
        if not record.query.kind.has_text_response:
            raise ValueError(f"query {record.query.name!r} does not take text")
        record.text_response = text
        record.correlation_message_id = correlation_message_id

    def toggle_choice(self, index: int) -> None:
        """Select the choice if unselected, deselect it otherwise."""
        record = self._require_pending()
        if not record.query.kind.has_choice_response:
            raise ValueError(f"query {record.query.name!r} does not take choices")
        if not 0 <= index < len(record.query.choices):
            raise IndexError(f"choice {index} out of range")
        record.choice_selections ^= {index}

    def clear_choices(self) -> None:
        """Drop every selection of the pending choice query."""
        record = self._require_pending()
        record.choice_selections.clear()

    def advance_to(self, query: Query) -> None:
        """Make `query` the pending query, replacing any earlier record of it."""
        if query.kind is QueryKind.RETRY:
            raise ValueError("cannot advance to RETRY")
        self.queries[query.name] = QueryRecord(query=query)
        self.pending_query_name = query.name

    def set_delivered(self, message_id: int) -> None:
        """Remember the message id the pending query was delivered under."""
        self._require_pending().query.message_id = message_id

    def _require_pending(self) -> QueryRecord:
        record = self.pending_record()
        if record is None:
            raise LookupError(f"dialog {self.dialog_name!r} has no pending query")
        return record
