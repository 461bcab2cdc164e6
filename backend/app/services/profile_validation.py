import re
from typing import Any

from pydantic import ValidationError

SCRIPT_TAG_PATTERN = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)


def sanitize_profile_data(value: Any) -> Any:
    """Trim strings and strip <script> blocks, recursing into dicts and lists."""
    if isinstance(value, str):
        return SCRIPT_TAG_PATTERN.sub("", value.strip())
    if isinstance(value, list):
        return [sanitize_profile_data(item) for item in value]
    if isinstance(value, dict):
        return {key: sanitize_profile_data(item) for key, item in value.items()}
    return value


def validation_messages(error: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into "field.path: message" strings."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "Invalid value")
        # pydantic prefixes custom ValueError messages with "Value error, "
        message = message.removeprefix("Value error, ")
        messages.append(f"{location}: {message}" if location else message)
    return messages


def merge_sections(existing: dict, changes: dict) -> dict:
    """Shallow-merge each nested section of a profile with the fields that were sent."""
    merged = dict(existing)
    for section, fields in changes.items():
        if isinstance(fields, dict) and isinstance(merged.get(section), dict):
            merged[section] = {**merged[section], **fields}
        else:
            merged[section] = fields
    return merged
