from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.params import Depends
from fastapi.responses import JSONResponse

from .db import close_db
from .errors import AgriCraftError
from .routes import classify, feedback, products, profiles
from .security import add_cors, verify_api_key
from .services.classifier import close_client
from .utils.logger import configure_logging

configure_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    await close_client()
    close_db()


app = FastAPI(
    title="AgriCraft API",
    version="0.1.0",
    dependencies=[Depends(verify_api_key)],
    lifespan=lifespan,
)

# CORS
add_cors(app)

app.include_router(classify.router)
app.include_router(products.router)
app.include_router(feedback.router)
app.include_router(profiles.router)


@app.exception_handler(AgriCraftError)
async def agricraft_error_handler(_request: Request, exc: AgriCraftError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


@app.get("/health")
def health():
    return {"status": "ok"}
