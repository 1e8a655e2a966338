# booking_assistant/db/mongo.py
from motor.motor_asyncio import AsyncIOMotorClient
from booking_assistant.core.config import settings
from booking_assistant.core.logger import logger


client = AsyncIOMotorClient(settings.MONGODB_URI)
db = client[settings.MONGODB_DB]

# Collections
doctors_collection = db.get_collection("doctors")
chat_sessions_collection = db.get_collection("chat_sessions")


# Function to check DB connection
async def verify_mongodb_connection():
    try:
        await client.server_info()
        logger.info("MongoDB connection established")
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
