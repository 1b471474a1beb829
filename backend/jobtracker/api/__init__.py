from jobtracker.api import (
    application_routes,
    export_routes,
    generate_routes,
    jd_routes,
    resume_routes,
    tracker_routes,
)

__all__ = [
    "application_routes",
    "export_routes",
    "generate_routes",
    "jd_routes",
    "resume_routes",
    "tracker_routes",
]
