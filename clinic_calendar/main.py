"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic_calendar import __version__
from clinic_calendar.api.endpoints import router
from clinic_calendar.utils.logging import setup_logging

setup_logging()

# Create FastAPI application
app = FastAPI(
    title="Clinic Calendar",
    description=(
        "Appointment scheduling helpers for the clinic calendar: conflict detection, "
        "grid snapping for drag and resize, and side-by-side layout of overlapping appointments."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "Scheduling",
            "description": "Stateless scheduling computations over appointment intervals.",
        },
        {
            "name": "Health",
            "description": "Service health monitoring and status checks.",
        },
    ],
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clinic_calendar.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
