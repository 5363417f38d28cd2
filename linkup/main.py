from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from linkup.core.config import settings
from linkup.core.errors import setup_exception_handlers
from linkup.db.init_db import create_all_tables
from linkup.middleware.request_logging import RequestLoggingMiddleware
from linkup.middleware.auth_logging import AuthLoggingMiddleware
from linkup.modules.auth.api.router import router as auth_router
from linkup.modules.follows.api.router import router as follows_router
from linkup.modules.user_management.api.router import router as profile_router
from linkup.modules.posts.api.router import router as posts_router
from linkup.modules.posts.comments.api.router import router as comments_router
from linkup.modules.posts.likes.api.router import router as likes_router
from linkup.modules.home_feed.api.router import router as home_feed_router
from linkup.modules.stories.api.router import router as stories_router
from linkup.modules.highlights.api.router import router as highlights_router
from linkup.modules.notifications.api.router import router as notifications_router
from linkup.modules.admin.api.router import router as admin_router
from linkup.modules.media.router import router as media_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("linkup")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    debug=settings.DEBUG,
    description="Social network API: profiles, follows, posts, stories and highlights",
    version=settings.VERSION,
    docs_url=settings.DOCS_URL,
    redoc_url="/redoc",
    swagger_ui_parameters={"defaultModelsExpandDepth": -1},
)

setup_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting server in {settings.ENVIRONMENT} mode")
    logger.info(f"BASE_URL: {settings.BASE_URL}")

    create_all_tables()


app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(AuthLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
# follows shares the /profile prefix and must come before the /profile/{username} catch-all
api = settings.API_PREFIX
app.include_router(auth_router, prefix=f"{api}/auth", tags=["authentication"])
app.include_router(follows_router, prefix=f"{api}/profile", tags=["follows"])
app.include_router(profile_router, prefix=f"{api}/profile", tags=["profile"])
app.include_router(posts_router, prefix=f"{api}/posts", tags=["posts"])
app.include_router(comments_router, prefix=f"{api}/posts/{{post_id}}/comments", tags=["comments"])
app.include_router(likes_router, prefix=f"{api}/posts/{{post_id}}", tags=["likes"])
app.include_router(home_feed_router, prefix=f"{api}/feed", tags=["home feed"])
app.include_router(stories_router, prefix=f"{api}/stories", tags=["stories"])
app.include_router(highlights_router, prefix=f"{api}/highlights", tags=["highlights"])
app.include_router(notifications_router, prefix=f"{api}/notifications", tags=["notifications"])
app.include_router(admin_router, prefix=f"{api}/admin", tags=["admin"])
app.include_router(media_router, prefix=f"{api}/media", tags=["media"])


@app.get("/")
async def root():
    return {
        "message": "Welcome to LinkUp",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "documentation": settings.DOCS_URL,
    }
