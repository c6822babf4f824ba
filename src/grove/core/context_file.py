"""CONTEXT.md written into every new grove directory."""

from pathlib import Path

from grove.core.errors import RegistryWriteError
from grove.core.types import RepositorySelection

CONTEXT_FILENAME = "CONTEXT.md"


def render_context(name: str, created_at: str, selections: list[RepositorySelection]) -> str:
    """Markdown skeleton describing a grove and the repositories it spans."""
    lines = [
        f"# {name}",
        "",
        f"Created: {created_at}",
        "",
        "## Purpose",
        "",
        "",
        "## Repositories",
        "",
    ]
    for selection in selections:
        label = selection.repository.name
        if selection.project_path:
            label = f"{label} ({selection.project_path})"
        lines.append(f"- {label}: {selection.repository.path}")
    lines.extend(["", "## Notes", ""])
    return "\n".join(lines)


def write_context_file(
    grove_dir: Path, name: str, created_at: str, selections: list[RepositorySelection]
) -> Path:
    path = grove_dir / CONTEXT_FILENAME
    try:
        path.write_text(render_context(name, created_at, selections), encoding="utf-8")
    except OSError as e:
        raise RegistryWriteError(path, e) from e
    return path
