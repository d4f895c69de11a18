"""Recipe Organizer API - Main Application"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipe_organizer import __version__
from recipe_organizer.config import settings
from recipe_organizer.errors import AppError
from recipe_organizer.routes import auth, family, meal_plans, pantry, recipes, shopping_lists, users
from recipe_organizer.services.database_service import db_service

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting {settings.app_name} ({settings.app_env})...")
    db_service.connect()
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")


# Create FastAPI app
# root_path is set for OpenAPI URL generation when behind a reverse proxy
app = FastAPI(
    title=settings.app_name,
    description="Recipes, pantry, shopping lists, meal plans and family groups",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    root_path=settings.root_path,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render application errors as {"detail", "error"}"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message} {exc.context}")
    else:
        logger.info(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.error_code},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body/query validation failures are 400s"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return JSONResponse(
        status_code=400,
        content={"detail": f"Validation error: {', '.join(messages)}", "error": "VALIDATION_ERROR"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": "INTERNAL_ERROR"}
    )


# Include routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(family.router, prefix="/family", tags=["Family Groups"])
app.include_router(recipes.router, prefix="/recipes", tags=["Recipes"])
app.include_router(pantry.router, prefix="/pantry", tags=["Pantry"])
app.include_router(shopping_lists.router, prefix="/shopping-lists", tags=["Shopping Lists"])
app.include_router(meal_plans.router, prefix="/meal-plans", tags=["Meal Plans"])


# Health check endpoints
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "recipe-organizer-api",
        "version": __version__
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs"
    }


def run():
    """Serve the API with uvicorn"""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
