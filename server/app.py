"""FastAPI application for serving contract flow data."""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.flow_routes import router as flow_router

from dotenv import load_dotenv
load_dotenv()  # load environment variables from .env file

# CORS origins - configurable via environment variable
# Use comma-separated values for multiple origins, or "*" for all (development only)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

VERSION = "0.1.0"

app = FastAPI(
    title="Contract Flow API",
    description="Execution-flow extraction and graph layout for compiled contracts",
    version=VERSION,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routes
app.include_router(flow_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": VERSION,
        "endpoints": {
            "flow": "/api/flow",
            "layout": "/api/flow/layout",
            "cache": "/api/flow/cache",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
