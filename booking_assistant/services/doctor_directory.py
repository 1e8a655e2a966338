# booking_assistant/services/doctor_directory.py

"""Read-only doctor lookups used by the assistant."""

import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection
from booking_assistant.models.doctor import Doctor


class DoctorDirectory(ABC):
    @abstractmethod
    async def find_doctors(
        self,
        doctor_name: Optional[str] = None,
        specialization: Optional[str] = None,
        limit: int = 5,
        sort: str = "rating",
    ) -> List[Doctor]:
        """Doctors matching all given criteria, best rated first when sort == "rating"."""


class InMemoryDoctorDirectory(DoctorDirectory):
    def __init__(self, doctors: Iterable[Doctor] = ()):
        self.doctors = list(doctors)

    async def find_doctors(self, doctor_name=None, specialization=None, limit=5, sort="rating"):
        matches = self.doctors
        if doctor_name:
            needle = doctor_name.lower()
            matches = [d for d in matches if needle in d.name.lower()]
        if specialization:
            needle = specialization.lower()
            matches = [d for d in matches if needle in d.specialization.lower()]
        if sort == "rating":
            matches = sorted(matches, key=lambda d: d.rating.average, reverse=True)
        return matches[:limit]


class MongoDoctorDirectory(DoctorDirectory):
    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    async def find_doctors(self, doctor_name=None, specialization=None, limit=5, sort="rating"):
        query = {"isActive": {"$ne": False}}
        if doctor_name:
            query["name"] = {"$regex": re.escape(doctor_name), "$options": "i"}
        if specialization:
            query["specialization"] = {"$regex": re.escape(specialization), "$options": "i"}

        cursor = self.collection.find(query)
        if sort == "rating":
            cursor = cursor.sort("rating.average", -1)
        docs = await cursor.limit(limit).to_list(length=limit)

        doctors = []
        for doc in docs:
            doc["id"] = str(doc.pop("_id"))
            doctors.append(Doctor.model_validate(doc))
        return doctors
