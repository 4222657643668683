from fastapi import FastAPI
from fastapi.responses import JSONResponse
from queryfilter.core.config import settings
from queryfilter.api.router import router as api_router

app = FastAPI(title=settings.APP_NAME, version="0.1.0")

app.include_router(api_router, prefix="/api")

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}
