# Run from project root: uvicorn ragchat.main:app --reload --port 3001

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ragchat.api.routes import router
from ragchat.core.config import PORT
from ragchat.core.context import AppContext, build_context

logging.basicConfig(level=logging.INFO)


def create_app(context: AppContext | None = None) -> FastAPI:
    app = FastAPI(title="Handbook Chat Backend")
    app.state.context = context if context is not None else build_context()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    logging.getLogger(__name__).info("AI API server running on port %d", PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
