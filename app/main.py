import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import MarketplaceError, marketplace_error_handler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_exception_handler(MarketplaceError, marketplace_error_handler)

@app.get("/")
def root():
    return {"message": "Welcome to SnapStudio Marketplace API", "docs": "/docs"}

from app.modules.profiles.router import router as profiles_router
from app.modules.catalog.router import router as catalog_router
from app.modules.sales.router import router as sales_router
from app.modules.reviews.router import router as reviews_router
from app.modules.moderation.router import router as moderation_router
from app.modules.cms.router import router as cms_router
from app.modules.admin.router import router as admin_router

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profiles_router, prefix=f"{settings.API_V1_STR}/profiles", tags=["profiles"])
app.include_router(catalog_router, prefix=f"{settings.API_V1_STR}/products", tags=["catalog"])
app.include_router(sales_router, prefix=f"{settings.API_V1_STR}/sales", tags=["sales"])
app.include_router(reviews_router, prefix=f"{settings.API_V1_STR}/reviews", tags=["reviews"])
app.include_router(moderation_router, prefix=f"{settings.API_V1_STR}/moderation", tags=["moderation"])
app.include_router(cms_router, prefix=f"{settings.API_V1_STR}/cms", tags=["cms"])
app.include_router(admin_router, prefix=f"{settings.API_V1_STR}/admin", tags=["admin"])
