"""Unit tests for the OllamaClient wrapper."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import BaseModel

from ollama_toolkit.generation import FormatType, Image, KeepAlive, TimeUnit
from ollama_toolkit.ollama import MaxToolRoundsExceededError, OllamaClient
from ollama_toolkit.tools import Tool, ToolExecutionError, compose


class CityParams(BaseModel):
    city: str


class WeatherTool(Tool):
    name = "get_weather"
    description = "Get the weather for a city"
    Params = CityParams

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.cities: list[str] = []

    async def call(self, params: CityParams) -> str:
        self.cities.append(params.city)
        if self.error is not None:
            raise self.error
        return f"Sunny in {params.city}"


def tool_call_response(*calls: tuple[str, dict]) -> dict:
    return {
        "model": "llama3.2",
        "done": True,
        "message": {
            "role": "assistant",
            "content": "",
            "tool_calls": [
                {"function": {"name": name, "arguments": arguments}}
                for name, arguments in calls
            ],
        },
    }


def final_response(content: str) -> dict:
    return {
        "model": "llama3.2",
        "done": True,
        "message": {"role": "assistant", "content": content},
    }


@pytest.fixture
def mock_ollama_async_client():
    """Create a mock ollama.AsyncClient."""
    with patch("ollama_toolkit.ollama.client.ollama.AsyncClient") as mock_class:
        mock_instance = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def ollama_client(mock_ollama_async_client):
    """Create an OllamaClient with mocked AsyncClient."""
    return OllamaClient(host="http://localhost:11434")


@pytest.mark.asyncio
async def test_client_initialization():
    """Test that OllamaClient initializes correctly."""
    with patch("ollama_toolkit.ollama.client.ollama.AsyncClient") as mock_class:
        client = OllamaClient(host="http://test:11434")
        assert client.host == "http://test:11434"
        assert client.default_keep_alive is None
        mock_class.assert_called_once_with(host="http://test:11434")


@pytest.mark.asyncio
async def test_check_connection_success(ollama_client, mock_ollama_async_client):
    """Test successful connection check."""
    mock_ollama_async_client.list.return_value = {"models": []}

    assert await ollama_client.check_connection() is True
    mock_ollama_async_client.list.assert_called_once()


@pytest.mark.asyncio
async def test_check_connection_failure(ollama_client, mock_ollama_async_client):
    """Test connection check when Ollama is unreachable."""
    mock_ollama_async_client.list.side_effect = Exception("Connection refused")

    assert await ollama_client.check_connection() is False


@pytest.mark.asyncio
async def test_chat_attaches_tools_and_directives(ollama_client, mock_ollama_async_client):
    """Test that descriptors, format and keep_alive reach the request."""
    mock_ollama_async_client.chat.return_value = final_response("Hi")
    tools = compose(WeatherTool())

    response = await ollama_client.chat(
        "llama3.2",
        [{"role": "user", "content": "Hello"}],
        tools=tools,
        format=FormatType.json(),
        keep_alive=KeepAlive.until(5, TimeUnit.MINUTES),
        options={"temperature": 0},
    )

    assert response["message"]["content"] == "Hi"
    kwargs = mock_ollama_async_client.chat.call_args.kwargs
    assert kwargs["model"] == "llama3.2"
    assert kwargs["stream"] is False
    assert kwargs["format"] == "json"
    assert kwargs["keep_alive"] == "5m"
    assert kwargs["options"] == {"temperature": 0}
    assert kwargs["tools"] == [info.model_dump() for info in tools.descriptors()]
    assert kwargs["tools"][0]["function"]["name"] == "get_weather"


@pytest.mark.asyncio
async def test_chat_omits_unset_directives(ollama_client, mock_ollama_async_client):
    """Test that no tools, format or keep_alive are sent unless given."""
    mock_ollama_async_client.chat.return_value = final_response("Hi")

    await ollama_client.chat("llama3.2", [{"role": "user", "content": "Hello"}])

    kwargs = mock_ollama_async_client.chat.call_args.kwargs
    assert "tools" not in kwargs
    assert "format" not in kwargs
    assert "keep_alive" not in kwargs


@pytest.mark.asyncio
async def test_chat_structured_format_sends_schema(ollama_client, mock_ollama_async_client):
    """Test that a structured format is sent as a schema object."""
    mock_ollama_async_client.chat.return_value = final_response('{"city": "Oslo"}')

    await ollama_client.chat(
        "llama3.2",
        [{"role": "user", "content": "Where?"}],
        format=FormatType.structured(CityParams),
    )

    sent = mock_ollama_async_client.chat.call_args.kwargs["format"]
    assert isinstance(sent, dict)
    assert sent["properties"]["city"]["type"] == "string"


@pytest.mark.asyncio
async def test_default_keep_alive_applies_when_unset(mock_ollama_async_client):
    """Test that the client-wide keep_alive is used as a fallback."""
    mock_ollama_async_client.chat.return_value = final_response("Hi")
    client = OllamaClient(
        host="http://localhost:11434", default_keep_alive=KeepAlive.indefinitely()
    )

    await client.chat("llama3.2", [{"role": "user", "content": "Hello"}])
    assert mock_ollama_async_client.chat.call_args.kwargs["keep_alive"] == -1

    await client.chat(
        "llama3.2",
        [{"role": "user", "content": "Hello"}],
        keep_alive=KeepAlive.unload_on_completion(),
    )
    assert mock_ollama_async_client.chat.call_args.kwargs["keep_alive"] == 0


@pytest.mark.asyncio
async def test_chat_converts_images(ollama_client, mock_ollama_async_client):
    """Test that Image objects are sent as base64 strings."""
    mock_ollama_async_client.chat.return_value = final_response("A cat")

    await ollama_client.chat(
        "llava",
        [{"role": "user", "content": "What is this?", "images": [Image.from_base64("aGk=")]}],
    )

    sent = mock_ollama_async_client.chat.call_args.kwargs["messages"]
    assert sent[0]["images"] == ["aGk="]


@pytest.mark.asyncio
async def test_chat_error_propagates(ollama_client, mock_ollama_async_client):
    """Test that Ollama failures are raised to the caller."""
    mock_ollama_async_client.chat.side_effect = Exception("model not found")

    with pytest.raises(Exception, match="model not found"):
        await ollama_client.chat("missing", [{"role": "user", "content": "Hi"}])


@pytest.mark.asyncio
async def test_chat_with_tools_runs_tool_round_trip(ollama_client, mock_ollama_async_client):
    """Test that tool calls are dispatched and fed back to the model."""
    weather = WeatherTool()
    mock_ollama_async_client.chat.side_effect = [
        tool_call_response(("get_weather", {"city": "Oslo"})),
        final_response("It is sunny in Oslo."),
    ]

    result = await ollama_client.chat_with_tools(
        "llama3.2",
        [{"role": "user", "content": "Weather in Oslo?"}],
        compose(weather),
    )

    assert result.content == "It is sunny in Oslo."
    assert result.rounds == 2
    assert weather.cities == ["Oslo"]
    assert [(c.name, c.result, c.error) for c in result.tool_calls] == [
        ("get_weather", '"Sunny in Oslo"', False)
    ]

    second_request = mock_ollama_async_client.chat.call_args_list[1].kwargs["messages"]
    assert [m["role"] for m in second_request] == ["user", "assistant", "tool"]
    assert second_request[2] == {
        "role": "tool",
        "content": '"Sunny in Oslo"',
        "tool_name": "get_weather",
    }
    assert [m["role"] for m in result.messages] == ["user", "assistant", "tool", "assistant"]


@pytest.mark.asyncio
async def test_chat_with_tools_dispatches_calls_in_order(
    ollama_client, mock_ollama_async_client
):
    """Test that several calls in one turn run one after another, in order."""
    weather = WeatherTool()
    mock_ollama_async_client.chat.side_effect = [
        tool_call_response(("get_weather", {"city": "Oslo"}), ("get_weather", {"city": "Rome"})),
        final_response("Done"),
    ]

    result = await ollama_client.chat_with_tools(
        "llama3.2", [{"role": "user", "content": "Compare"}], compose(weather)
    )

    assert weather.cities == ["Oslo", "Rome"]
    assert len(result.tool_calls) == 2


@pytest.mark.asyncio
async def test_chat_with_tools_reports_unknown_tool_to_model(
    ollama_client, mock_ollama_async_client
):
    """Test that an unknown tool name becomes an error message for the model."""
    mock_ollama_async_client.chat.side_effect = [
        tool_call_response(("get_stock_price", {"symbol": "ACME"})),
        final_response("Sorry, I cannot look that up."),
    ]

    result = await ollama_client.chat_with_tools(
        "llama3.2", [{"role": "user", "content": "ACME price?"}], compose(WeatherTool())
    )

    executed = result.tool_calls[0]
    assert executed.error is True
    assert executed.result.startswith("Error: Unknown tool name")
    second_request = mock_ollama_async_client.chat.call_args_list[1].kwargs["messages"]
    assert second_request[-1]["content"] == executed.result


@pytest.mark.asyncio
async def test_chat_with_tools_reports_invalid_arguments_to_model(
    ollama_client, mock_ollama_async_client
):
    """Test that invalid arguments become an error message for the model."""
    weather = WeatherTool()
    mock_ollama_async_client.chat.side_effect = [
        tool_call_response(("get_weather", {"town": "Oslo"})),
        final_response("Let me try again."),
    ]

    result = await ollama_client.chat_with_tools(
        "llama3.2", [{"role": "user", "content": "Weather?"}], compose(weather)
    )

    assert result.tool_calls[0].error is True
    assert "Invalid arguments" in result.tool_calls[0].result
    assert weather.cities == []


@pytest.mark.asyncio
async def test_chat_with_tools_propagates_tool_failure(
    ollama_client, mock_ollama_async_client
):
    """Test that a failing tool aborts the chat."""
    mock_ollama_async_client.chat.side_effect = [
        tool_call_response(("get_weather", {"city": "Oslo"})),
        final_response("unreachable"),
    ]

    with pytest.raises(ToolExecutionError):
        await ollama_client.chat_with_tools(
            "llama3.2",
            [{"role": "user", "content": "Weather?"}],
            compose(WeatherTool(error=RuntimeError("API down"))),
        )

    assert mock_ollama_async_client.chat.call_count == 1


@pytest.mark.asyncio
async def test_chat_with_tools_gives_up_after_max_rounds(
    ollama_client, mock_ollama_async_client
):
    """Test the bound on model/tool rounds."""
    mock_ollama_async_client.chat.return_value = tool_call_response(
        ("get_weather", {"city": "Oslo"})
    )

    with pytest.raises(MaxToolRoundsExceededError) as exc_info:
        await ollama_client.chat_with_tools(
            "llama3.2",
            [{"role": "user", "content": "Weather?"}],
            compose(WeatherTool()),
            max_rounds=3,
        )

    assert exc_info.value.rounds == 3
    assert mock_ollama_async_client.chat.call_count == 3


@pytest.mark.asyncio
async def test_chat_with_tools_does_not_modify_input_messages(
    ollama_client, mock_ollama_async_client
):
    """Test that the caller's message list is left untouched."""
    mock_ollama_async_client.chat.return_value = final_response("Hi")
    messages = [{"role": "user", "content": "Hello"}]

    await ollama_client.chat_with_tools("llama3.2", messages, compose(WeatherTool()))

    assert messages == [{"role": "user", "content": "Hello"}]


@pytest.mark.asyncio
async def test_chat_with_tools_holds_lock_during_dispatch(
    ollama_client, mock_ollama_async_client
):
    """Test that the given lock is held while a tool runs and released after."""
    lock = asyncio.Lock()
    held = []

    class LockCheckingTool(WeatherTool):
        async def call(self, params: CityParams) -> str:
            held.append(lock.locked())
            return await super().call(params)

    mock_ollama_async_client.chat.side_effect = [
        tool_call_response(("get_weather", {"city": "Oslo"})),
        final_response("Sunny."),
    ]

    await ollama_client.chat_with_tools(
        "llama3.2",
        [{"role": "user", "content": "Weather?"}],
        compose(LockCheckingTool()),
        lock=lock,
    )

    assert held == [True]
    assert not lock.locked()


@pytest.mark.asyncio
async def test_close(ollama_client):
    """Test that close() can be awaited."""
    await ollama_client.close()
