"""Unit tests for the tool registry, argument decoding and catalog."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from mcp_gmail.errors import ArgumentValidationError, UnknownOperationError, UpstreamError
from mcp_gmail.operations import CalendarOperations, MailOperations, TaskOperations
from mcp_gmail.tools import Operation, ToolRegistry, ToolResult, build_registry
from mcp_gmail.tools import arguments as args

EXPECTED_TOOLS = [
    "gmail_list_emails",
    "gmail_get_email",
    "gmail_send_email",
    "gmail_search",
    "gmail_get_thread",
    "gmail_modify_labels",
    "gmail_list_labels",
    "gmail_list_drafts",
    "gmail_get_draft",
    "gmail_create_draft",
    "gmail_update_draft",
    "gmail_delete_draft",
    "gmail_send_draft",
    "gmail_refresh_sender_identity",
    "calendar_list_calendars",
    "calendar_list_events",
    "calendar_get_event",
    "tasks_list_tasklists",
    "tasks_list_tasks",
    "tasks_get_task",
    "tasks_create_task",
    "tasks_update_task",
    "tasks_complete_task",
    "tasks_delete_task",
]


@pytest.fixture
def ops() -> tuple[MagicMock, MagicMock, MagicMock]:
    """Operation libraries whose coroutine methods are AsyncMocks."""
    return (
        MagicMock(spec=MailOperations),
        MagicMock(spec=CalendarOperations),
        MagicMock(spec=TaskOperations),
    )


@pytest.fixture
def catalog(ops) -> ToolRegistry:
    return build_registry(*ops)


@pytest.mark.unit
class TestToolRegistry:
    """Tests for ToolRegistry registration and lookup."""

    def test_should_reject_duplicate_names(self) -> None:
        """Verify names are unique."""
        registry = ToolRegistry()
        operation = Operation("ping", "Ping", args.NoArguments, AsyncMock())
        registry.register(operation)

        with pytest.raises(ValueError, match="Tool already registered: ping"):
            registry.register(operation)

    def test_should_raise_for_unknown_name(self) -> None:
        """Verify get() raises for names outside the catalog."""
        with pytest.raises(UnknownOperationError, match="Unknown tool: nope"):
            ToolRegistry().get("nope")

    @pytest.mark.asyncio
    async def test_should_return_error_result_for_unknown_tool(self) -> None:
        """Verify call() never raises for an unknown tool."""
        result = await ToolRegistry().call("gmail_teleport", {})

        assert result == ToolResult(text="Error: Unknown tool: gmail_teleport", is_error=True)

    @pytest.mark.asyncio
    async def test_should_serialize_success_as_indented_json(self) -> None:
        """Verify results are pretty-printed JSON."""
        registry = ToolRegistry()
        handler = AsyncMock(return_value=[{"id": "L1", "name": "Work"}])
        registry.register(Operation("labels", "Labels", args.NoArguments, handler))

        result = await registry.call("labels", None)

        assert result.is_error is False
        assert json.loads(result.text) == [{"id": "L1", "name": "Work"}]
        assert result.text == json.dumps([{"id": "L1", "name": "Work"}], indent=2)

    @pytest.mark.asyncio
    async def test_should_wrap_operation_failures(self) -> None:
        """Verify upstream failures come back as error results."""
        registry = ToolRegistry()
        handler = AsyncMock(side_effect=UpstreamError("mail API error (500): Backend Error", 500))
        registry.register(Operation("boom", "Boom", args.NoArguments, handler))

        result = await registry.call("boom", {})

        assert result.is_error is True
        assert result.text == "Error: mail API error (500): Backend Error"

    @pytest.mark.asyncio
    async def test_should_reject_missing_required_argument_before_handler(self) -> None:
        """Verify validation happens before the operation runs."""
        registry = ToolRegistry()
        handler = AsyncMock()
        registry.register(Operation("get", "Get", args.MessageIdArguments, handler))

        result = await registry.call("get", {})

        assert result.is_error is True
        assert result.text.startswith("Error: Invalid arguments for get: messageId")
        handler.assert_not_awaited()


@pytest.mark.unit
class TestOperationDecode:
    """Tests for Operation.decode() and invoke()."""

    @pytest.mark.asyncio
    async def test_should_map_wire_names_to_parameters(self) -> None:
        """Verify camelCase arguments reach the handler as keyword parameters."""
        handler = AsyncMock(return_value={})
        operation = Operation("send", "Send", args.ComposeArguments, handler)

        await operation.invoke(
            {
                "to": "bob@example.com",
                "subject": "Re: Lunch",
                "body": "Sure",
                "threadId": "t1",
                "replyToMessageId": "m1",
            }
        )

        handler.assert_awaited_once_with(
            to="bob@example.com",
            subject="Re: Lunch",
            body="Sure",
            thread_id="t1",
            original_message_id="m1",
        )

    @pytest.mark.asyncio
    async def test_should_fill_defaults(self) -> None:
        """Verify omitted optional arguments take their documented defaults."""
        handler = AsyncMock(return_value=[])
        operation = Operation("list", "List", args.ListEmailsArguments, handler)

        await operation.invoke({})

        handler.assert_awaited_once_with(max_results=10, folder="inbox", query=None)

    def test_should_accept_unknown_folder(self) -> None:
        """Verify folder names outside the published enum pass decode unchanged."""
        operation = Operation("list", "List", args.ListEmailsArguments, AsyncMock())

        decoded = operation.decode({"folder": "archive"})

        assert decoded.folder == "archive"

    def test_should_reject_wrong_types(self) -> None:
        """Verify non-integer maxResults fails validation."""
        operation = Operation("list", "List", args.ListEmailsArguments, AsyncMock())

        with pytest.raises(ArgumentValidationError, match="maxResults"):
            operation.decode({"maxResults": "lots"})

    def test_should_reject_invalid_task_status(self) -> None:
        """Verify task status is limited to Google's two values."""
        operation = Operation("update", "Update", args.UpdateTaskArguments, AsyncMock())

        with pytest.raises(ArgumentValidationError, match="status"):
            operation.decode({"taskId": "k1", "status": "done"})


@pytest.mark.unit
class TestCatalog:
    """Tests for the published catalog."""

    def test_should_publish_every_tool_once_in_order(self, catalog: ToolRegistry) -> None:
        """Verify the catalog names and order."""
        names = [operation.name for operation in catalog.descriptors()]

        assert names == EXPECTED_TOOLS
        assert len(catalog) == 24
        assert len(set(names)) == 24

    def test_should_describe_every_tool(self, catalog: ToolRegistry) -> None:
        """Verify each tool has a description and an object schema."""
        for operation in catalog.descriptors():
            schema = operation.input_schema()
            assert operation.description
            assert schema["type"] == "object"
            assert isinstance(schema["properties"], dict)
            assert isinstance(schema["required"], list)

    def test_should_publish_camel_case_schema(self, catalog: ToolRegistry) -> None:
        """Verify schema property names, defaults and enum."""
        schema = catalog.get("gmail_list_emails").input_schema()
        properties = schema["properties"]

        assert set(properties) == {"folder", "maxResults", "query"}
        assert properties["maxResults"]["default"] == 10
        assert properties["maxResults"]["type"] == "integer"
        assert properties["folder"]["default"] == "inbox"
        assert properties["folder"]["enum"] == [
            "inbox",
            "sent",
            "unread",
            "starred",
            "important",
            "trash",
            "spam",
            "all",
        ]
        assert properties["query"]["type"] == "string"
        assert "default" not in properties["query"]
        assert schema["required"] == []
        assert "title" not in schema

    def test_should_mark_required_arguments(self, catalog: ToolRegistry) -> None:
        """Verify required arguments are listed by wire name."""
        send = catalog.get("gmail_send_email").input_schema()
        modify = catalog.get("gmail_modify_labels").input_schema()
        update = catalog.get("tasks_update_task").input_schema()

        assert set(send["required"]) == {"to", "subject", "body"}
        assert "replyToMessageId" in send["properties"]
        assert modify["required"] == ["messageId"]
        assert modify["properties"]["addLabels"]["type"] == "array"
        assert update["required"] == ["taskId"]
        assert update["properties"]["tasklistId"]["default"] == "@default"

    def test_should_take_no_arguments_for_list_labels(self, catalog: ToolRegistry) -> None:
        """Verify argument-less tools publish an empty object schema."""
        schema = catalog.get("gmail_list_labels").input_schema()

        assert schema["properties"] == {}
        assert schema["required"] == []

    @pytest.mark.asyncio
    async def test_should_route_to_operation(self, catalog: ToolRegistry, ops) -> None:
        """Verify each tool calls its own operation."""
        _, calendar, tasks = ops

        await catalog.call("calendar_get_event", {"eventId": "e1"})
        await catalog.call("tasks_complete_task", {"taskId": "k1", "tasklistId": "L1"})

        calendar.get_event.assert_awaited_once_with(event_id="e1", calendar_id="primary")
        tasks.complete_task.assert_awaited_once_with(task_id="k1", tasklist_id="L1")
