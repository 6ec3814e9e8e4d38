
from pydantic import ValidationError


def validation_error_parser(error: ValidationError, component: str) -> list[dict[str, str]]:
    return [
        {
            "component": component,
            "path": ".".join(map(str, err["loc"])) or "<root>",
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def export_filename(name: str, extension: str = ".md") -> str:
    """Derive the export file name: spaces become underscores, extension appended."""
    return f"{name.replace(' ', '_')}{extension}"
