# staysearch/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from staysearch.api.routes import router as api_router
from staysearch.catalog import get_catalog
from staysearch.config import HOST, PORT
from staysearch.utils import logger

# create FastAPI instance
app = FastAPI(title="StaySearch API", version="0.1.0")

# the browsing front end is served from a different origin during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.on_event("startup")
def on_startup_load_catalog():
    # a bad catalog file should stop the service here, not on the first request
    catalog = get_catalog()
    logger.info("Serving %d listings", len(catalog))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
