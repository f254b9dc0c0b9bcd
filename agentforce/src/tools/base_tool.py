# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import re
import json
import time
import logging

from typing import Any, ClassVar
from json_repair import repair_json
from pydantic import ValidationError

from ..utils.parsing import extract_between_patterns
from ..types.tool_types import ToolInterface, ToolResult

logger = logging.getLogger(__name__)

TOOL_STOP_TOKEN = "</TOOL_CALL>"

_TOOL_CALL_PATTERN = re.compile(r"<TOOL_CALL>(.*?)(?:</TOOL_CALL>|$)", re.DOTALL)


def get_tool_instructions() -> str:
    example_args = {"arg1": "value1", "arg2": "value2"}
    return f"""When you need to use a tool, format your request using a valid JSON string inside this XML like structure:

<TOOL_CALL>
<TOOL_NAME>tool_name</TOOL_NAME>
<TOOL_ARGS>
{json.dumps(example_args, indent=2)}
</TOOL_ARGS>
{TOOL_STOP_TOKEN}

Do not wrap the tool call in backticks like a code block. Simply start generating the <TOOL_CALL> block directly.
"""


def _summarise_repairs(error: str, repair_logs: list[dict]) -> str:
    """Group json_repair log messages into a short feedback message."""
    repair_categories = {
        "quotes": [],
        "delimiters": [],
        "structure": [],
        "other": [],
    }
    for log in repair_logs:
        message = log.get("text", "")
        lowered = message.lower()
        if "quote" in lowered:
            repair_categories["quotes"].append(message)
        elif any(word in lowered for word in ["delimiter", "comma", "colon"]):
            repair_categories["delimiters"].append(message)
        elif any(word in lowered for word in ["object", "array", "brace", "bracket"]):
            repair_categories["structure"].append(message)
        else:
            repair_categories["other"].append(message)

    feedback_parts = [f"Error encountered during JSON parsing:\n- {error}\n", "\nRepairs needed:"]
    for category, messages in repair_categories.items():
        unique_messages = list(dict.fromkeys(messages))
        if unique_messages:
            feedback_parts.append(f"\n{category.title()}:")
            feedback_parts.extend(f"- {msg}" for msg in unique_messages)
    return "\n".join(feedback_parts)


# Populated by BaseTool subclasses as they are defined.
tool_registry: dict[str, type[ToolInterface]] = {}


class BaseTool(ToolInterface):
    """Abstract base class for all tools"""

    TOOL_NAME: ClassVar[str]
    TOOL_DESCRIPTION: ClassVar[str]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Skip registering the BaseTool class itself.
        if cls.__name__ != "BaseTool":
            tool_registry[cls.TOOL_NAME] = cls

    @classmethod
    def args_str_to_dict(cls, args_str: str) -> tuple[dict | None, str | None]:
        """
        Parse a tool's JSON argument string.

        Falls back to json_repair for malformed JSON; the repairs made are
        returned as warnings. Returns (None, error) when nothing usable is
        recovered.
        """
        try:
            args = json.loads(args_str)
            if isinstance(args, dict):
                return args, None
            return None, f"Tool arguments must be a JSON object, got {type(args).__name__}"
        except ValueError as e:
            error = str(e)

        try:
            repair_result = repair_json(args_str, return_objects=True, logging=True)
            if not isinstance(repair_result, tuple):
                raise ValueError("Unrecognized repair json result")
            repaired_obj, repair_logs = repair_result
        except Exception as e:
            return None, f"Could not parse tool arguments: {e}"

        if not isinstance(repaired_obj, dict) or not repaired_obj:
            return None, f"Could not parse tool arguments: {error}"

        warnings = _summarise_repairs(error, repair_logs)
        logger.warning(f"Repaired arguments for {cls.TOOL_NAME}: {warnings}")
        return repaired_obj, warnings

    @classmethod
    def to_prompt_format(cls) -> str:
        """Render the tool's documentation, argument schema and examples for a prompt"""
        examples_str = []
        for tool_instance, expected_output in cls.generate_examples():
            examples_str.append(
                f"""<EXAMPLE>
<TOOL_CALL>
<TOOL_NAME>{cls.TOOL_NAME}</TOOL_NAME>
<TOOL_ARGS>
{json.dumps(tool_instance.model_dump(exclude_none=True), indent=2)}
</TOOL_ARGS>
{TOOL_STOP_TOKEN}
{expected_output}
</EXAMPLE>"""
            )
        examples_joined = "\n\n".join(examples_str)

        return f"""\n## `{cls.TOOL_NAME}` Tool Documentation

{cls.TOOL_DESCRIPTION}

<TOOL_NAME>
{cls.TOOL_NAME}
</TOOL_NAME>
<TOOL_ARGS_SCHEMA>
{json.dumps(cls.model_json_schema().get("properties", {}), indent=2)}
</TOOL_ARGS_SCHEMA>
<EXAMPLES>
{examples_joined}
</EXAMPLES>

This concludes the {cls.TOOL_NAME} tool documentation.
"""


def parse_tool_content(tool_content: str) -> tuple[str | None, dict | None, str | None]:
    """Returns tool name, tool args, and parse warnings (or the parse error)"""
    extracted_tool_name = extract_between_patterns(tool_content, "<TOOL_NAME>", "</TOOL_NAME>")
    if extracted_tool_name is None:
        return None, None, "No tool name found in tool call"
    tool_name = extracted_tool_name.strip()

    tool_cls = tool_registry.get(tool_name)
    if tool_cls is None:
        return None, None, f"{tool_name} does not correspond to a registered tool"

    tool_args_str = extract_between_patterns(tool_content, "<TOOL_ARGS>", "</TOOL_ARGS>")
    if tool_args_str is None:
        return None, None, f"Could not extract tool arguments in {tool_name} tool call"

    tool_args_dict, parse_warnings = tool_cls.args_str_to_dict(tool_args_str)
    if tool_args_dict is None:
        logger.info(f"Tool parse error: {parse_warnings}")
        return None, None, parse_warnings or "Could not parse tool args."

    return tool_name, tool_args_dict, parse_warnings


def find_tool_calls(response_text: str) -> list[str]:
    """Return the body of every <TOOL_CALL> block; a trailing unclosed call is included."""
    return [m.group(1) for m in _TOOL_CALL_PATTERN.finditer(response_text) if m.group(1).strip()]


async def execute_tool(
    tool_name: str, tool_args: dict[str, Any], parse_warnings: str | None = None
) -> ToolResult:
    """Validate arguments against the tool model and run it. Never raises."""
    tool_cls = tool_registry.get(tool_name)
    if tool_cls is None:
        return ToolResult(
            tool_name=tool_name,
            success=False,
            errors=f"{tool_name} does not correspond to a registered tool",
        )

    try:
        validated_tool = tool_cls.model_validate(tool_args)
    except ValidationError as e:
        logger.error(f"Invalid arguments for {tool_name}: {e}")
        return ToolResult(tool_name=tool_name, success=False, errors=f"Invalid tool arguments: {e}")

    try:
        start_time = time.time()
        tool_result = await validated_tool.run()
        tool_result.duration = time.time() - start_time
    except Exception as e:
        logger.error(f"Error during tool execution: {str(e)}")
        return ToolResult(tool_name=tool_name, success=False, errors=f"Tool runtime error: {e}")

    if parse_warnings:
        warning_msg = f"\nThe tool call was successful, but raised the following warnings during parsing and fixing: {parse_warnings}"
        tool_result.warnings = (tool_result.warnings or "") + warning_msg

    return tool_result


async def execute_tool_calls(response_text: str) -> list[ToolResult]:
    """Run every tool call found in a model response, in order of appearance."""
    results = []
    for tool_content in find_tool_calls(response_text):
        tool_name, tool_args, parse_warnings = parse_tool_content(tool_content)
        if tool_name is None:
            name = extract_between_patterns(tool_content, "<TOOL_NAME>", "</TOOL_NAME>")
            results.append(
                ToolResult(
                    tool_name=(name or "undefined").strip(),
                    success=False,
                    errors=f"This tool call could not be parsed: {parse_warnings}",
                )
            )
            continue
        results.append(await execute_tool(tool_name, tool_args, parse_warnings))
    return results
