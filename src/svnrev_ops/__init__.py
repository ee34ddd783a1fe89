from .revision import query_revision, render_summary, write_stamp

__all__ = ["query_revision", "render_summary", "write_stamp"]
