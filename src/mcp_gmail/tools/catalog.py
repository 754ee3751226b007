"""The published tool catalog.

Tool names, argument names, defaults and enums are a client-facing contract;
renaming any of them breaks existing agent prompts and configurations.
"""

from mcp_gmail.operations import CalendarOperations, MailOperations, TaskOperations
from mcp_gmail.tools import arguments as args
from mcp_gmail.tools.registry import Operation, ToolRegistry


def build_registry(
    mail: MailOperations,
    calendar: CalendarOperations,
    tasks: TaskOperations,
) -> ToolRegistry:
    """Register every tool against its operation implementation."""
    registry = ToolRegistry()

    for operation in [
        # Gmail
        Operation(
            "gmail_list_emails",
            "List recent emails from a specified folder. Defaults to inbox.",
            args.ListEmailsArguments,
            mail.list_emails,
        ),
        Operation(
            "gmail_get_email",
            "Get the full content of a specific email by its message ID",
            args.MessageIdArguments,
            mail.get_email,
        ),
        Operation(
            "gmail_send_email",
            "Send a new email or reply to an existing thread. When replying, provide both "
            "threadId and replyToMessageId for proper threading.",
            args.ComposeArguments,
            mail.send_email,
        ),
        Operation(
            "gmail_search",
            "Search emails using Gmail's powerful search syntax",
            args.SearchArguments,
            mail.search_emails,
        ),
        Operation(
            "gmail_get_thread",
            "Get all messages in an email thread/conversation",
            args.ThreadIdArguments,
            mail.get_thread,
        ),
        Operation(
            "gmail_modify_labels",
            "Add or remove labels from an email (e.g., mark as read, archive, star)",
            args.ModifyLabelsArguments,
            mail.modify_labels,
        ),
        Operation(
            "gmail_list_labels",
            "List all available Gmail labels in the account",
            args.NoArguments,
            mail.list_labels,
        ),
        # Gmail drafts
        Operation(
            "gmail_list_drafts",
            "List email drafts with recipient, subject and snippet",
            args.ListDraftsArguments,
            mail.list_drafts,
        ),
        Operation(
            "gmail_get_draft",
            "Get the full content of a draft by its draft ID",
            args.DraftIdArguments,
            mail.get_draft,
        ),
        Operation(
            "gmail_create_draft",
            "Create an email draft. The signature is appended as for sent mail; provide "
            "threadId and replyToMessageId to draft a threaded reply.",
            args.ComposeArguments,
            mail.create_draft,
        ),
        Operation(
            "gmail_update_draft",
            "Replace the recipient, subject and body of an existing draft",
            args.UpdateDraftArguments,
            mail.update_draft,
        ),
        Operation(
            "gmail_delete_draft",
            "Permanently delete a draft",
            args.DraftIdArguments,
            mail.delete_draft,
        ),
        Operation(
            "gmail_send_draft",
            "Send an existing draft",
            args.DraftIdArguments,
            mail.send_draft,
        ),
        Operation(
            "gmail_refresh_sender_identity",
            "Reload the display name, address and signature used for outgoing mail "
            "(use after changing them in Gmail settings)",
            args.NoArguments,
            mail.refresh_sender_identity,
        ),
        # Calendar
        Operation(
            "calendar_list_calendars",
            "List all calendars accessible by the account",
            args.NoArguments,
            calendar.list_calendars,
        ),
        Operation(
            "calendar_list_events",
            "List calendar events in a time window (default: the next 7 days), with "
            "recurring events expanded and ordered by start time",
            args.ListEventsArguments,
            calendar.list_events,
        ),
        Operation(
            "calendar_get_event",
            "Get details of a calendar event, including attendees",
            args.GetEventArguments,
            calendar.get_event,
        ),
        # Tasks
        Operation(
            "tasks_list_tasklists",
            "List all task lists",
            args.ListTasklistsArguments,
            tasks.list_tasklists,
        ),
        Operation(
            "tasks_list_tasks",
            "List tasks in a task list",
            args.ListTasksArguments,
            tasks.list_tasks,
        ),
        Operation(
            "tasks_get_task",
            "Get a task by ID",
            args.TaskIdArguments,
            tasks.get_task,
        ),
        Operation(
            "tasks_create_task",
            "Create a new task",
            args.CreateTaskArguments,
            tasks.create_task,
        ),
        Operation(
            "tasks_update_task",
            "Update a task. Only the fields provided are changed.",
            args.UpdateTaskArguments,
            tasks.update_task,
        ),
        Operation(
            "tasks_complete_task",
            "Mark a task as completed",
            args.TaskIdArguments,
            tasks.complete_task,
        ),
        Operation(
            "tasks_delete_task",
            "Delete a task",
            args.TaskIdArguments,
            tasks.delete_task,
        ),
    ]:
        registry.register(operation)

    return registry
