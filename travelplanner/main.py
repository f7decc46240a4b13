# -------------------------------------------------------------
# Travel Planner AI Backend — FastAPI Entrypoint
# -------------------------------------------------------------
import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Routers
from travelplanner.api.itinerary_router import router as itinerary_router
from travelplanner.api.trip_router import router as trip_router

from travelplanner.config import Settings, settings as default_settings
from travelplanner.db.mongo import init_mongo
from travelplanner.errors import MissingFieldsError, TravelPlannerError
from travelplanner.services.itinerary_service import ItineraryService
from travelplanner.services.trip_service import TripStore

log = logging.getLogger("travelplanner")


def _validation_message(exc: RequestValidationError) -> str:
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if loc:
            fields.append(".".join(loc))
    if not fields:
        return "Please provide all required fields: fromCity, destination, numberOfDays, budget, and familyType"
    return f"Missing or invalid fields: {', '.join(dict.fromkeys(fields))}"


# -------------------------------------------------------------
# Error handlers: every error leaves as {error, message, raw?}
# -------------------------------------------------------------
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TravelPlannerError)
    async def travel_planner_error_handler(request: Request, exc: TravelPlannerError):
        log.warning("%s %s -> %s %s: %s", request.method, request.url.path, exc.status_code, exc.error, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        err = MissingFieldsError(_validation_message(exc))
        return JSONResponse(status_code=err.status_code, content=err.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            content = {"error": "Not Found", "message": "The requested endpoint does not exist"}
        else:
            content = {"error": str(exc.detail), "message": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        # log stack once. do not leak details to client
        log.exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "Something went wrong on the server"},
        )


# -------------------------------------------------------------
# Initialization Logic (MongoDB)
# -------------------------------------------------------------
async def initialize_services(settings: Settings) -> None:
    log.info("Starting warmup process... (environment: %s)", settings.ENV)
    try:
        await init_mongo(settings)
    except Exception:
        log.error("MongoDB initialization failed; trip endpoints will retry lazily.")
        return
    log.info("Warmup completed successfully.")


# -------------------------------------------------------------
# App factory
# -------------------------------------------------------------
def create_app(
    settings: Optional[Settings] = None,
    itinerary_service: Optional[ItineraryService] = None,
    trip_store: Optional[TripStore] = None,
) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    app = FastAPI(
        title="Travel Planner AI Backend",
        description="AI-generated day-by-day travel itineraries with saved trips",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.itinerary_service = itinerary_service or ItineraryService.from_settings(settings)
    app.state.trip_store = trip_store

    register_exception_handlers(app)

    # Register API routers
    app.include_router(itinerary_router)
    app.include_router(trip_router)

    # ---------------------------------------------------------
    # Health Check
    # ---------------------------------------------------------
    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "message": "Travel Planner API is running",
            "apiKeyConfigured": settings.api_key_configured,
            "provider": settings.LLM_PROVIDER,
            "useLlm": settings.USE_LLM,
        }

    # ---------------------------------------------------------
    # Startup Hook — connect to Mongo unless a store was injected
    # ---------------------------------------------------------
    if trip_store is None:

        @app.on_event("startup")
        async def on_startup():
            log.info("Application startup complete.")
            if not settings.api_key_configured:
                log.warning("GEMINI_API_KEY is not set; generation fails with 500 unless LLM_FALLBACK is on.")
            app.state.warmup_task = asyncio.create_task(initialize_services(settings))

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("travelplanner.main:app", host="0.0.0.0", port=default_settings.PORT)


if __name__ == "__main__":
    main()
