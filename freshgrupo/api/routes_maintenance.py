import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from freshgrupo.core.config import settings
from freshgrupo.core.monitoring import monitoring
from freshgrupo.db.deps import get_db, require_admin
from freshgrupo.db.seed import seed_database, table_counts
from freshgrupo.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter()

API_ENDPOINTS = {
    "auth": "/api/auth",
    "users": "/api/users",
    "addresses": "/api/addresses",
    "categories": "/api/categories",
    "unitTypes": "/api/unit-types",
    "products": "/api/products",
    "packTypes": "/api/pack-types",
    "packs": "/api/packs",
    "packProducts": "/api/pack-products",
    "cart": "/api/cart",
    "orders": "/api/orders",
    "payments": "/api/payments",
    "createRazorpayOrder": "/api/create-razorpay-order",
    "verifyPayment": "/api/verify-payment",
    "public": "/api/public",
    "health": "/health",
}


@router.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Health check could not reach the database: {e}")
        database = "unavailable"

    return {
        "status": "OK" if database == "connected" else "ERROR",
        "database": database,
        "environment": settings.ENVIRONMENT,
        "monitoring": monitoring.get_health_status(),
    }


@router.get("/api")
def api_index():
    return {"message": "FreshGrupo API", "version": "1.0.0", "endpoints": API_ENDPOINTS}


@router.post("/api/seed")
def seed(db: Session = Depends(get_db)):
    # Never forces: a populated database is left untouched
    try:
        counts = seed_database(db)
    except SQLAlchemyError as e:
        logger.exception(f"Seeding failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to seed database")
    return {"message": "Database seeded successfully", "counts": counts}


@router.post("/api/force-sync")
def force_sync(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    logger.warning(f"Force sync requested by user {admin.id}")
    try:
        counts = seed_database(db, force=True)
    except SQLAlchemyError as e:
        logger.exception(f"Force sync failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to sync database")
    return {"message": "Database recreated and seeded", "counts": counts}


@router.get("/api/db-stats")
def db_stats(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return {"tables": table_counts(db)}
