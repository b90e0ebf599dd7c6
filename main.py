from fastapi import FastAPI
from uri_shortener.config import settings
from uri_shortener.logging_config import configure_logging
from uri_shortener.api.v1 import uris, redirect

configure_logging(settings.log_level)

# Create FastAPI app
# Every fixed route lives under /api so the root namespace belongs to tokens
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Persistent, reversible URI shortening",
    debug=settings.debug,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/api/docs",
        "redoc": "/api/redoc"
    }


@app.get("/api/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}




######## Include routers
app.include_router(uris.router, prefix="/api/v1")
# Catch-all token route goes last
app.include_router(redirect.router)
