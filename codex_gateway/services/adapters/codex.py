"""Adapter for `codex exec --json` runs.

Rules:
- The prompt is passed as the last argument, annotated with the task id.
- `item.completed` records carrying an `agent_message` item map to kind='message'.
- Records whose item is a `command_execution` map to kind='command'.
- Records whose item is a `file_change` with a string path map to kind='file_change'.
- Everything else is unclassified.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .base import AgentAdapter, StreamEvent

_PATH_KEYS = ("path", "file", "filename")


class CodexAdapter(AgentAdapter):
    name = "codex"

    def build_args(self, prompt: str, task_id: str) -> List[str]:
        return [
            "exec",
            "--full-auto",
            "--json",
            f"{prompt}\n\n(You are executing task {task_id}.)",
        ]

    def classify(self, record: Any) -> Optional[StreamEvent]:
        if not isinstance(record, dict):
            return None
        item = record.get("item")
        if not isinstance(item, dict):
            return None

        item_type = item.get("type")
        if item_type == "agent_message":
            text = item.get("text")
            if record.get("type") == "item.completed" and isinstance(text, str):
                return StreamEvent(kind="message", payload={"text": text})
            return None
        if item_type == "command_execution":
            return StreamEvent(
                kind="command",
                payload={
                    "command": _command_text(item.get("command")),
                    "exit_code": _exit_code(item.get("exit_code")),
                },
            )
        if item_type == "file_change":
            path = next((item[k] for k in _PATH_KEYS if item.get(k) is not None), None)
            if isinstance(path, str):
                return StreamEvent(kind="file_change", payload={"path": path})
        return None


def _command_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(part) for part in value)
    return str(value)


def _exit_code(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid exit status
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
