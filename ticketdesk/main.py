"""
Ticketdesk Agent - FastAPI Backend
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from ticketdesk.config import get_settings
from ticketdesk.routes import agent, health
from ticketdesk.middleware.logging_middleware import LoggingMiddleware

settings = get_settings()

app = FastAPI(
    title="Ticketdesk Agent",
    description="Ticket action agent with LangGraph orchestration",
    version="1.0.0"
)

# Middleware runs bottom-up: logging wraps the routes, CORS wraps everything
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

app.include_router(agent.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "Ticketdesk Agent API", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.fastapi_host, port=settings.fastapi_port)
