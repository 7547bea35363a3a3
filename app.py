import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, LOG_LEVEL
from routes.availability_route import availability_router
from routes.config_route import config_router
from routes.order_route import order_router
from routes.reservation_route import reservation_router
from routes.schedule_route import schedule_router
from routes.table_route import table_router
from routes.websocket import websocket_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Table Reservation API")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(table_router)
app.include_router(order_router)
app.include_router(reservation_router)
app.include_router(schedule_router)
app.include_router(config_router)
app.include_router(availability_router)
app.include_router(websocket_router)

@app.get("/")
async def base_path():
    """
    Root endpoint to verify that the API is running.

    Returns:
        dict: A success message.
    """
    return {"success": True}
