"""Unit tests for session export."""

import csv
import io
import json
from uuid import uuid4

from agentforms.conversation.export import SessionExport, export_csv, export_json
from agentforms.conversation.models import ExtractedField, MessageRole, Session
from agentforms.schema.models import AgentSchema
from tests.factories import FieldFactory, MessageFactory


def build_export() -> SessionExport:
    session = Session(agent_id=uuid4(), completion_rate=50.0)
    message = MessageFactory.create(
        "My email is sam@x.com, thanks", session_id=session.session_id
    )
    reply = MessageFactory.create(
        "Thanks! What's your name?",
        session_id=session.session_id,
        role=MessageRole.AGENT,
    )
    field = ExtractedField(
        field_id="email",
        value="sam@x.com",
        confidence=95,
        source_message_id=message.id,
        raw_value="sam@x.com",
        validated=True,
    )
    return SessionExport(
        session=session,
        messages=[message, reply],
        extracted_fields={"email": field},
    )


class TestExportJson:
    """Tests for JSON export."""

    def test_contains_session_messages_and_fields(self) -> None:
        """The document holds the full session record."""
        export = build_export()
        data = json.loads(export_json(export))

        assert data["session"]["session_id"] == str(export.session.session_id)
        assert [m["role"] for m in data["messages"]] == ["visitor", "agent"]
        assert data["extracted_fields"]["email"]["value"] == "sam@x.com"
        assert "exported_at" in data


class TestExportCsv:
    """Tests for CSV export."""

    def test_sections(self) -> None:
        """Metadata, messages and fields are written as separate sections."""
        export = build_export()
        schema = AgentSchema(fields=(FieldFactory.email(), FieldFactory.text()))
        rows = list(csv.reader(io.StringIO(export_csv(export, schema))))

        assert rows[0] == ["Type", "Field", "Value"]
        assert ["Session", "ID", str(export.session.session_id)] in rows
        assert ["Session", "Status", "active"] in rows
        assert ["Session", "Completion Rate", "50"] in rows

        messages_at = rows.index(["Messages"])
        assert rows[messages_at + 1] == ["Role", "Content", "Timestamp"]
        assert rows[messages_at + 2][:2] == ["visitor", "My email is sam@x.com, thanks"]

        fields_at = rows.index(["Extracted Fields"])
        assert rows[fields_at + 2] == ["Email", "email", "sam@x.com", "true", "95"]

    def test_unknown_field_falls_back_to_id(self) -> None:
        """Fields missing from the schema are labelled by id."""
        export = build_export()
        rows = list(csv.reader(io.StringIO(export_csv(export, AgentSchema()))))

        fields_at = rows.index(["Extracted Fields"])
        assert rows[fields_at + 2][:2] == ["email", ""]
