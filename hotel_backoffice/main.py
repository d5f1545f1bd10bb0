# hotel_backoffice/main.py

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hotel_backoffice.config import ALLOWED_ORIGINS, HOST, PORT
from hotel_backoffice.logging_config import setup_logging
from hotel_backoffice.middleware import RequestIDMiddleware
from hotel_backoffice.responses import register_exception_handlers
from hotel_backoffice.routes.analytics import router as analytics_router
from hotel_backoffice.routes.booking_links import booking_addons_router, booking_rooms_router
from hotel_backoffice.routes.bookings import router as bookings_router
from hotel_backoffice.routes.catalog import (
    addons_router,
    bed_types_router,
    features_router,
    floors_router,
    guests_router,
    payment_statuses_router,
    room_statuses_router,
)
from hotel_backoffice.routes.health import router as health_router
from hotel_backoffice.routes.logs import router as logs_router
from hotel_backoffice.routes.metrics import router as metrics_router
from hotel_backoffice.routes.room_class_links import (
    room_class_bed_types_router,
    room_class_features_router,
)
from hotel_backoffice.routes.rooms import room_classes_router, rooms_router

API_PREFIX = "/api"

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Hotel Back Office API",
    description="API for the hotel management dashboard: rooms, bookings, guests and analytics",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

register_exception_handlers(app)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
for router in (
    floors_router,
    bed_types_router,
    features_router,
    room_statuses_router,
    payment_statuses_router,
    addons_router,
    guests_router,
    room_classes_router,
    rooms_router,
    room_class_bed_types_router,
    room_class_features_router,
    bookings_router,
    booking_rooms_router,
    booking_addons_router,
    analytics_router,
    logs_router,
):
    app.include_router(router, prefix=API_PREFIX)

logger.info("app_configured", routes=len(app.routes))

if __name__ == "__main__":
    uvicorn.run("hotel_backoffice.main:app", host=HOST, port=PORT)
