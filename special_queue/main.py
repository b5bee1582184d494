from dotenv import load_dotenv


from fastapi import FastAPI

from special_queue.api.api_v1 import router as api_v1
from special_queue.core.config import settings
from special_queue.core.lifespan import lifespan

load_dotenv()  # Load .env variables into os.environ


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)


@app.get("/")
def root():
    return {"message": "Hello from special-queue!"}


app.include_router(api_v1)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
