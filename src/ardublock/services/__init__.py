from .export_service import export_json, export_sketch, export_text_report, write_export
from .project import GenerationResult, Project, generate, load_project, project_from_dict

__all__ = [
    "export_json",
    "export_sketch",
    "export_text_report",
    "write_export",
    "GenerationResult",
    "Project",
    "generate",
    "load_project",
    "project_from_dict",
]
