"""Session export as JSON or CSV."""

import csv
import io
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

from agentforms.conversation.models import ExtractedField, Message, Session
from agentforms.schema.models import AgentSchema

ExportFormat = Literal["json", "csv"]


class SessionExport(BaseModel):
    """Everything recorded for one session."""

    session: Session
    messages: list[Message] = Field(default_factory=list)
    extracted_fields: dict[str, ExtractedField] = Field(default_factory=dict)
    exported_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def export_json(export: SessionExport) -> str:
    return export.model_dump_json(indent=2)


def export_csv(export: SessionExport, schema: AgentSchema) -> str:
    """Render a session as three CSV sections: metadata, messages, fields."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    session = export.session

    writer.writerow(["Type", "Field", "Value"])
    writer.writerow(["Session", "ID", str(session.session_id)])
    writer.writerow(["Session", "Status", session.status.value])
    writer.writerow(["Session", "Started At", session.started_at.isoformat()])
    writer.writerow(
        ["Session", "Ended At", session.ended_at.isoformat() if session.ended_at else ""]
    )
    writer.writerow(["Session", "Completion Rate", f"{session.completion_rate:g}"])
    writer.writerow([])

    writer.writerow(["Messages"])
    writer.writerow(["Role", "Content", "Timestamp"])
    for message in export.messages:
        writer.writerow([message.role.value, message.content, message.created_at.isoformat()])
    writer.writerow([])

    writer.writerow(["Extracted Fields"])
    writer.writerow(["Field Label", "Field Type", "Value", "Is Valid", "Confidence Score"])
    for field_id, entry in export.extracted_fields.items():
        field = schema.get_field(field_id)
        writer.writerow([
            field.label if field else field_id,
            field.type if field else "",
            entry.value,
            str(entry.validated).lower(),
            entry.confidence,
        ])

    return buffer.getvalue()
