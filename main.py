# main.py (project root)
from fastapi import FastAPI
import uvicorn
from app.db.mongodb import connect_to_mongo, close_mongo_connection
from app.endpoints import vehicle_endpoint, booking_endpoint, availability_endpoint

app = FastAPI(title="Tour Booking - Fleet Scheduling")


app.include_router(vehicle_endpoint.router, prefix="/api/vehicle_management")
app.include_router(booking_endpoint.router, prefix="/api/booking_management")
app.include_router(availability_endpoint.router, prefix="/api/availability")


@app.on_event("startup")
async def startup():
    await connect_to_mongo()


@app.on_event("shutdown")
async def shutdown():
    await close_mongo_connection()


@app.get("/")
async def root():
    return {"message": "Tour Booking API running"}


@app.get("/api/health")
async def health():
    return {"success": True, "message": "Server is running"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
