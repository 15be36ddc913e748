"""Hook host payloads.

The host passes a JSON object on stdin and reads a single JSON envelope from
stdout. Only the fields used here are modelled; everything else is ignored.
"""

from __future__ import annotations

import json
import logging
from typing import TextIO

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# Tools whose use may have created a marker file.
TRIGGER_TOOLS: frozenset[str] = frozenset({"Write", "Edit", "MultiEdit"})


class HookInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hook_event_name: str | None = None
    tool_name: str | None = None
    tool_input: dict[str, object] | None = None
    prompt: str | None = None

    @property
    def triggers_dispatch(self) -> bool:
        return self.tool_name in TRIGGER_TOOLS


class HookSpecificOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hook_event_name: str = Field(serialization_alias="hookEventName")
    additional_context: str = Field(serialization_alias="additionalContext")


class HookOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hook_specific_output: HookSpecificOutput = Field(serialization_alias="hookSpecificOutput")

    @classmethod
    def context(cls, event_name: str, text: str) -> HookOutput:
        return cls(
            hook_specific_output=HookSpecificOutput(
                hook_event_name=event_name, additional_context=text
            )
        )

    def to_json(self) -> str:
        return json.dumps(self.model_dump(by_alias=True), ensure_ascii=False)


def read_hook_input(stream: TextIO) -> HookInput:
    """Parse the host payload; unreadable input is treated as an empty payload."""

    raw = stream.read()
    if not raw.strip():
        return HookInput()
    try:
        return HookInput.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Ignoring malformed hook input", extra={"error": str(e)})
        return HookInput()


def write_hook_output(stream: TextIO, event_name: str, text: str) -> None:
    stream.write(HookOutput.context(event_name, text).to_json() + "\n")
    stream.flush()
