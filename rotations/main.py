from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from rotations.core.config import CORS_ORIGINS, LOG_LEVEL
from rotations.core.errors import MarketplaceError
from rotations.routers import (
    analytics, applications, blog, content, favorites, outreach, programs, reviews, specialties, team
)

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Clinical Rotations API")

# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(programs.router)
app.include_router(specialties.router)
app.include_router(applications.router)
app.include_router(favorites.router)
app.include_router(reviews.router)
app.include_router(content.router)
app.include_router(blog.router)
app.include_router(team.router)
app.include_router(outreach.router)
app.include_router(analytics.router)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/")
async def root():
    return {
        "message": "Welcome to the Clinical Rotations API",
        "endpoints": {
            "programs": "/programs",
            "specialties": "/specialties",
            "applications": "/applications",
            "favorites": "/favorites",
            "reviews": "/reviews",
            "pages": "/pages/{id_or_slug}",
            "blog": "/blog-posts",
            "team": "/team-members",
            "newsletter": "/newsletter/subscribe",
            "contact": "/contact",
            "analytics": "/analytics/summary"
        }
    }
