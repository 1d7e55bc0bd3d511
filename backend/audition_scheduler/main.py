from fastapi import FastAPI

from .routers import public, slots, windows
from .utils.request_id import request_id_middleware

app = FastAPI(title="Audition Scheduling API")
app.middleware("http")(request_id_middleware)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(windows.router)
app.include_router(slots.router)
app.include_router(public.router)
