"""Text rendering of records for command output."""

from prdman.records.models import Record


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def lock_marker(record: Record) -> str:
    return " [LOCKED]" if record.locked else ""


def format_record_line(record: Record) -> str:
    """One-line summary used by list."""
    return (
        f"[{record.status.value}] {record.id}{lock_marker(record)} "
        f"(priority: {record.priority}) - {record.name}"
    )


def format_deletion_line(record: Record) -> str:
    return f"- {record.id}: {record.name}{lock_marker(record)}"


def format_record_detail(record: Record) -> str:
    """Full record, as shown by details, create and update."""
    lines = [
        f"ID: {record.id}{lock_marker(record)}",
        f"Priority: {record.priority}",
        f"Name: {record.name}",
        f"Status: {record.status.value}",
        f"Description: {record.description}",
        "Steps:",
    ]
    lines.extend(f"  {i}. {step}" for i, step in enumerate(record.steps, 1))

    if record.acceptance_criteria:
        lines.append("Acceptance Criteria:")
        lines.extend(f"  {i}. {c}" for i, c in enumerate(record.acceptance_criteria, 1))

    if record.note:
        lines.append(f"Note: {record.note}")

    lines.append(f"Created: {record.created_at.isoformat()}")
    lines.append(f"Updated: {record.updated_at.isoformat()}")

    return "\n".join(lines)
