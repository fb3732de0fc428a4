"""Mapping tables from runtime statuses and hooks to report terms."""

import logging

from featurelink.core.models import HookType, ItemStatus, ItemType, Status

logger = logging.getLogger(__name__)

STATUS_MAPPING: dict[Status, ItemStatus] = {
    Status.PASSED: ItemStatus.PASSED,
    Status.FAILED: ItemStatus.FAILED,
    Status.SKIPPED: ItemStatus.SKIPPED,
    Status.PENDING: ItemStatus.SKIPPED,
    Status.AMBIGUOUS: ItemStatus.SKIPPED,
    Status.UNDEFINED: ItemStatus.SKIPPED,
    Status.UNUSED: ItemStatus.SKIPPED,
}

HOOK_MAPPING: dict[HookType, tuple[ItemType, str]] = {
    HookType.BEFORE: (ItemType.BEFORE_TEST, "Before hooks"),
    HookType.AFTER: (ItemType.AFTER_TEST, "After hooks"),
    HookType.BEFORE_STEP: (ItemType.BEFORE_METHOD, "Before step"),
    HookType.AFTER_STEP: (ItemType.AFTER_METHOD, "After step"),
}


def map_item_status(status: Status | str | None) -> ItemStatus | None:
    """Map a runtime status to an item status.

    Returns:
        None for a missing status, SKIPPED for a status with no mapping.
    """
    if status is None:
        return None
    try:
        return STATUS_MAPPING[Status(status)]
    except (KeyError, ValueError):
        logger.error(
            "Unable to find direct mapping for item status %r, reporting SKIPPED",
            status,
        )
        return ItemStatus.SKIPPED


def map_log_level(status: Status | str) -> str:
    """Map a runtime status to the level of the log it produces."""
    value = status.value if isinstance(status, Status) else status
    if value.lower() == Status.PASSED.value:
        return "INFO"
    if value.lower() == Status.SKIPPED.value:
        return "WARN"
    return "ERROR"


def hook_type_and_name(hook_type: HookType) -> tuple[ItemType, str]:
    """Return the item type and display name of a hook kind."""
    return HOOK_MAPPING[hook_type]
