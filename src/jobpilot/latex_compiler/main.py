"""FastAPI application entry point for the LaTeX compilation service."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from jobpilot.latex_compiler import routes

load_dotenv()

app = FastAPI(
    title="jobpilot LaTeX Compiler",
    description="Compiles LaTeX documents to PDF",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Report framework errors (404, 405) with the service's ``{error}`` body."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.get("/health", tags=["health"])
def health_check() -> dict[str, str]:
    """Return the current status of the service."""
    return {"status": "ok"}


app.include_router(routes.router)


def main() -> None:
    """Start the compilation server."""
    import uvicorn

    uvicorn.run(
        "jobpilot.latex_compiler.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8080")),
    )


if __name__ == "__main__":
    main()
