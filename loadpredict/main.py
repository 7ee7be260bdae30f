import logging

from fastapi import FastAPI

from dotenv import load_dotenv

from loadpredict.config.settings import get_settings
from loadpredict.routes import load

load_dotenv()

config = get_settings()
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Load Prediction Service", version="0.1.0")


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(load.router, prefix="/load", tags=["load"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        reload=False,
    )
