"""Operation library: one coroutine per tool, grouped by Google service."""

from mcp_gmail.operations.calendar import CalendarOperations
from mcp_gmail.operations.mail import FOLDER_QUERIES, MailOperations, folder_query
from mcp_gmail.operations.tasks import TaskOperations

__all__ = [
    "CalendarOperations",
    "MailOperations",
    "TaskOperations",
    "FOLDER_QUERIES",
    "folder_query",
]
