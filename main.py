import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
from contextlib import asynccontextmanager
from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie
from creator_analytics.errors import AnalyticsError, StorageFailure
from creator_analytics.models.user import User
from creator_analytics.models.creator import Creator
from creator_analytics.models.analytics import Analytics
from creator_analytics.routes import analytics_routes, auth_routes, creator_routes, upload_routes, user_routes
from creator_analytics.utils.logger import logger

# Load environment variables
load_dotenv()

db_initialized = False

async def ensure_beanie_initialized():
    global db_initialized
    if db_initialized:
        return

    mongo_uri = os.getenv("MONGODB_URI")
    if not mongo_uri:
        logger.warning("MONGODB_URI not set, skipping database connection")
        return

    try:
        client = AsyncIOMotorClient(mongo_uri, tz_aware=True)

        # Safely get database name
        try:
            db = client.get_default_database()
        except Exception:
            # No default db in URI (raises ConfigurationError)
            db = client[os.getenv("MONGODB_DB", "creator_analytics")]

        await init_beanie(
            database=db,
            document_models=[
                User,
                Creator,
                Analytics,
            ]
        )
        db_initialized = True
        logger.info("Beanie initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize Beanie: {e}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_beanie_initialized()
    yield

app = FastAPI(title="Creator Analytics API", version="1.0.0", lifespan=lifespan)

# CORS configuration
origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError):
    if isinstance(exc, StorageFailure):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

# Include Routers
app.include_router(auth_routes.router)
app.include_router(creator_routes.router)
app.include_router(analytics_routes.router)
app.include_router(upload_routes.router)
app.include_router(user_routes.router)

@app.get("/health")
async def health_check():
    try:
        if not db_initialized:
            await ensure_beanie_initialized()

        # Try a simple query
        await User.count()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "ok" if "error" not in db_status else "degraded",
        "message": "Creator Analytics backend is running",
        "database": db_status,
        "initialized": db_initialized
    }

@app.get("/")
async def root():
    return {"message": "API Running Successfully"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", 3001)), reload=True)
