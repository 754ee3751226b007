"""Argument models for every tool.

Field names are the operation's keyword parameters; aliases are the
camelCase names clients send. Defaults and enums here are part of the
published tool contract.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from mcp_gmail.operations.mail import FOLDER_QUERIES

FOLDERS = list(FOLDER_QUERIES)
TaskStatus = Literal["needsAction", "completed"]


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NoArguments(ToolArguments):
    pass


# =============================================================================
# Gmail
# =============================================================================


class ListEmailsArguments(ToolArguments):
    # Unknown names are accepted and resolve to the inbox filter.
    folder: str = Field(
        default="inbox",
        description="Email folder to list (default: inbox)",
        json_schema_extra={"enum": FOLDERS},
    )
    max_results: int = Field(
        default=10,
        ge=1,
        alias="maxResults",
        description="Maximum number of emails to return (default: 10)",
    )
    query: str | None = Field(
        default=None,
        description=(
            "Additional Gmail search query to filter results "
            "(e.g., 'from:someone@example.com', 'subject:hello')"
        ),
    )


class MessageIdArguments(ToolArguments):
    message_id: str = Field(
        alias="messageId", min_length=1, description="The ID of the email message"
    )


class ComposeArguments(ToolArguments):
    to: str = Field(min_length=1, description="Recipient email address")
    subject: str = Field(description="Email subject line")
    body: str = Field(
        description="Email body content (plain text). Signature will be auto-appended."
    )
    thread_id: str | None = Field(
        default=None,
        alias="threadId",
        description="Optional thread ID to reply to an existing conversation",
    )
    original_message_id: str | None = Field(
        default=None,
        alias="replyToMessageId",
        description="The message ID of the email being replied to (required for proper threading)",
    )


class SearchArguments(ToolArguments):
    query: str = Field(
        min_length=1,
        description=(
            "Gmail search query. Examples: 'from:user@example.com', 'is:unread', "
            "'has:attachment', 'newer_than:2d', 'subject:meeting'"
        ),
    )
    max_results: int = Field(
        default=20, ge=1, alias="maxResults", description="Maximum number of results (default: 20)"
    )


class ThreadIdArguments(ToolArguments):
    thread_id: str = Field(
        alias="threadId", min_length=1, description="The ID of the thread to retrieve"
    )


class ModifyLabelsArguments(MessageIdArguments):
    add_labels: list[str] = Field(
        default_factory=list,
        alias="addLabels",
        description="Labels to add (e.g., 'STARRED', 'IMPORTANT')",
    )
    remove_labels: list[str] = Field(
        default_factory=list,
        alias="removeLabels",
        description="Labels to remove (e.g., 'UNREAD', 'INBOX' for archive)",
    )


class ListDraftsArguments(ToolArguments):
    max_results: int = Field(
        default=10, ge=1, alias="maxResults", description="Maximum number of drafts (default: 10)"
    )


class DraftIdArguments(ToolArguments):
    draft_id: str = Field(alias="draftId", min_length=1, description="The ID of the draft")


class UpdateDraftArguments(ComposeArguments):
    draft_id: str = Field(
        alias="draftId", min_length=1, description="The ID of the draft to replace"
    )


# =============================================================================
# Calendar
# =============================================================================


class ListEventsArguments(ToolArguments):
    calendar_id: str = Field(
        default="primary", alias="calendarId", description="Calendar ID (default: 'primary')"
    )
    time_min: str | None = Field(
        default=None,
        alias="timeMin",
        description="Start of the window in RFC 3339 format (default: now)",
    )
    time_max: str | None = Field(
        default=None,
        alias="timeMax",
        description="End of the window in RFC 3339 format (default: 7 days after timeMin)",
    )
    max_results: int = Field(
        default=50,
        ge=1,
        alias="maxResults",
        description="Maximum number of events to return (default: 50)",
    )


class GetEventArguments(ToolArguments):
    event_id: str = Field(alias="eventId", min_length=1, description="The ID of the event")
    calendar_id: str = Field(
        default="primary", alias="calendarId", description="Calendar ID (default: 'primary')"
    )


# =============================================================================
# Tasks
# =============================================================================


class ListTasklistsArguments(ToolArguments):
    max_results: int = Field(
        default=100,
        ge=1,
        alias="maxResults",
        description="Maximum number of task lists (default: 100)",
    )


class TasklistArguments(ToolArguments):
    tasklist_id: str = Field(
        default="@default",
        alias="tasklistId",
        description="Task list ID (default: '@default', the user's default list)",
    )


class ListTasksArguments(TasklistArguments):
    show_completed: bool = Field(
        default=True, alias="showCompleted", description="Include completed tasks (default: true)"
    )
    max_results: int = Field(
        default=100, ge=1, alias="maxResults", description="Maximum number of tasks (default: 100)"
    )


class TaskIdArguments(TasklistArguments):
    task_id: str = Field(alias="taskId", min_length=1, description="The ID of the task")


class CreateTaskArguments(TasklistArguments):
    title: str = Field(min_length=1, description="Task title")
    notes: str | None = Field(default=None, description="Task notes (optional)")
    due: str | None = Field(
        default=None, description="Due date in RFC 3339 format, e.g. '2025-01-31T00:00:00Z'"
    )


class UpdateTaskArguments(TaskIdArguments):
    title: str | None = Field(default=None, description="New title (unchanged if omitted)")
    notes: str | None = Field(default=None, description="New notes (unchanged if omitted)")
    due: str | None = Field(default=None, description="New due date (unchanged if omitted)")
    status: TaskStatus | None = Field(
        default=None, description="New status (unchanged if omitted)"
    )
