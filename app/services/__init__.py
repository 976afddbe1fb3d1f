from .analytics import assemble_report

__all__ = ["assemble_report"]
