"""retrieve-google-maps-platform-docs — free-text documentation retrieval."""

from __future__ import annotations

from functools import partial
from typing import Any

from pydantic import BaseModel

from gmp_mcp.config import ServerSettings
from gmp_mcp.protocol.models import ToolCallRequest, ToolResponse
from gmp_mcp.protocol.registry import ToolDescriptor
from gmp_mcp.protocol.sink import ToolLogger
from gmp_mcp.tools.base import call_upstream, tool_failure
from gmp_mcp.upstream.client import DocsClient

TOOL_NAME = "retrieve-google-maps-platform-docs"

DESCRIPTION = (
    "Searches Google Maps Platform documentation, code samples, GitHub repositories and "
    "terms of service for information relevant to the prompt. Use it for any question about "
    "building with Google Maps Platform products."
)

NO_INFORMATION_TEXT = "No information available for this prompt. Please try rephrasing it."


def _input_schema(contexts: list[str]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "prompt": {
                "type": "string",
                "description": (
                    "The user's question or task about Google Maps Platform, "
                    "with as much detail as possible."
                ),
            },
            "search_context": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Google Maps Platform products the prompt is about. "
                    f"Known products: {', '.join(contexts)}."
                ),
            },
        },
        "required": ["prompt"],
    }


class RetrieveDocsArguments(BaseModel):
    prompt: str
    search_context: list[str] | None = None


async def handle_retrieve_docs(
    request: ToolCallRequest,
    log: ToolLogger,
    *,
    client: DocsClient,
    settings: ServerSettings,
) -> ToolResponse:
    try:
        args = RetrieveDocsArguments.model_validate(request.arguments)
        await log.info(
            f"Calling tool {TOOL_NAME} with prompt: {args.prompt}, "
            f"search_context: {args.search_context}"
        )
        body = {
            "message": args.prompt,
            "contexts": args.search_context or list(settings.default_contexts),
            "source": settings.source,
        }
        return await call_upstream(
            request.name,
            partial(client.chat, body),
            log,
            fallback_text=NO_INFORMATION_TEXT,
        )
    except Exception as exc:
        return await tool_failure(request.name, exc, log)


def retrieve_docs_tool(client: DocsClient, settings: ServerSettings) -> ToolDescriptor:
    return ToolDescriptor(
        name=TOOL_NAME,
        description=DESCRIPTION,
        input_schema=_input_schema(settings.default_contexts),
        handler=partial(handle_retrieve_docs, client=client, settings=settings),
    )
