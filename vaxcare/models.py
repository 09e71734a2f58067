# vaxcare/models.py
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from .database import Base

ROLE_PATIENT = "patient"
ROLE_STAFF = "staff"
ROLE_ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_PATIENT)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True)
    name = Column(String(150))
    dob = Column(Date, nullable=True)
    phone = Column(String(30))
    gender = Column(String(20))
    medical_history = Column(Text)
    address = Column(Text)
    id_proof = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Vaccine(Base):
    __tablename__ = "vaccines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    dose_type = Column(String(100))
    required_age = Column(Integer, default=0)
    description = Column(Text)
    side_effects = Column(Text)
    manufacturer = Column(String(150))


class Center(Base):
    __tablename__ = "centers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    address = Column(Text)


class InventoryBatch(Base):
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    vaccine_id = Column(Integer, ForeignKey("vaccines.id"), index=True)
    batch_no = Column(String(100))
    quantity = Column(Integer, nullable=False, default=0)
    expiry_date = Column(Date, nullable=True)  # NULL never expires


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), index=True)
    vaccine_id = Column(Integer, ForeignKey("vaccines.id"))
    center_id = Column(Integer, ForeignKey("centers.id"), nullable=True)
    appointment_date = Column(DateTime, nullable=False)
    status = Column(String(30), nullable=False, default="booked")
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    dose_no = Column(Integer, default=1)
    note = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class VaccinationRecord(Base):
    __tablename__ = "vaccination_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), index=True)
    vaccine_id = Column(Integer, ForeignKey("vaccines.id"))
    dose_no = Column(Integer, default=1)
    given_on = Column(DateTime)
    given_by = Column(Integer, ForeignKey("users.id"))
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    type = Column(String(30), default="feedback")
    appointment_id = Column(Integer, nullable=True)
    center_id = Column(Integer, nullable=True)
    rating = Column(Integer, default=5)
    message = Column(Text, nullable=False)
    attachment_path = Column(String(255))
    status = Column(String(20), default="open")
    admin_reply = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    title = Column(String(255))
    message = Column(Text)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
