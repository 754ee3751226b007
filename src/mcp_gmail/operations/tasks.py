"""Google Tasks operations.

Updates use read-then-write: the current task is fetched, only the supplied
fields are overlaid, and the whole task is written back with PUT. A field
that is not supplied is never blanked.
"""

from typing import Any
from urllib.parse import quote

from mcp_gmail import normalize
from mcp_gmail.client import ApiClient, ClientProvider, ServiceKind


def _task_path(tasklist_id: str, task_id: str | None = None) -> str:
    path = f"/lists/{quote(tasklist_id, safe='@')}/tasks"
    if task_id is not None:
        path = f"{path}/{quote(task_id, safe='')}"
    return path


def merge_task(current: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Overlay supplied fields on the current task.

    None in updates means "not supplied". Reopening a task drops its
    completion timestamp.
    """
    merged = dict(current)
    for key, value in updates.items():
        if value is not None:
            merged[key] = value
    if updates.get("status") == "needsAction":
        merged.pop("completed", None)
    return merged


class TaskOperations:
    """Tasks tool implementations."""

    def __init__(self, clients: ClientProvider) -> None:
        self.clients = clients

    async def _tasks(self) -> ApiClient:
        return await self.clients.get_client(ServiceKind.TASKS)

    async def list_tasklists(self, max_results: int = 100) -> list[dict[str, Any]]:
        api = await self._tasks()
        response = await api.get("/users/@me/lists", params={"maxResults": max_results})
        return [normalize.tasklist(item) for item in response.get("items", [])]

    async def list_tasks(
        self,
        tasklist_id: str = "@default",
        show_completed: bool = True,
        max_results: int = 100,
    ) -> list[dict[str, Any]]:
        api = await self._tasks()
        response = await api.get(
            _task_path(tasklist_id),
            params={
                "showCompleted": str(show_completed).lower(),
                "maxResults": max_results,
            },
        )
        return [normalize.task(item) for item in response.get("items", [])]

    async def get_task(self, task_id: str, tasklist_id: str = "@default") -> dict[str, Any]:
        api = await self._tasks()
        return normalize.task(await api.get(_task_path(tasklist_id, task_id)))

    async def create_task(
        self,
        title: str,
        notes: str | None = None,
        due: str | None = None,
        tasklist_id: str = "@default",
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"title": title}
        if notes is not None:
            body["notes"] = notes
        if due is not None:
            body["due"] = due

        api = await self._tasks()
        return normalize.task(await api.post(_task_path(tasklist_id), json_data=body))

    async def update_task(
        self,
        task_id: str,
        tasklist_id: str = "@default",
        title: str | None = None,
        notes: str | None = None,
        due: str | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        """Update only the supplied fields of a task."""
        api = await self._tasks()
        path = _task_path(tasklist_id, task_id)

        current = await api.get(path)
        merged = merge_task(
            current, {"title": title, "notes": notes, "due": due, "status": status}
        )
        return normalize.task(await api.put(path, json_data=merged))

    async def complete_task(self, task_id: str, tasklist_id: str = "@default") -> dict[str, Any]:
        """Mark a task completed, keeping every other field from a fresh read."""
        return await self.update_task(task_id, tasklist_id=tasklist_id, status="completed")

    async def delete_task(self, task_id: str, tasklist_id: str = "@default") -> dict[str, Any]:
        api = await self._tasks()
        await api.delete(_task_path(tasklist_id, task_id))
        return {"status": "deleted", "id": task_id, "tasklistId": tasklist_id}
