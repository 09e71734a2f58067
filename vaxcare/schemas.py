# vaxcare/schemas.py
from datetime import date, datetime
from pydantic import BaseModel
from typing import Optional

# Auth
class RegisterIn(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    class Config:
        from_attributes = True

# Patients
class PatientOut(BaseModel):
    id: int
    user_id: Optional[int]
    name: Optional[str]
    dob: Optional[date]
    phone: Optional[str]
    gender: Optional[str]
    medical_history: Optional[str]
    address: Optional[str]
    id_proof: Optional[str]
    class Config:
        from_attributes = True

# Catalog
class VaccineIn(BaseModel):
    name: str
    dose_type: Optional[str] = None
    required_age: Optional[int] = None
    description: Optional[str] = None
    side_effects: Optional[str] = None
    manufacturer: Optional[str] = None

class VaccineOut(VaccineIn):
    id: int
    class Config:
        from_attributes = True

class CenterIn(BaseModel):
    name: str
    address: Optional[str] = None

class CenterOut(CenterIn):
    id: int
    class Config:
        from_attributes = True

# Inventory
class InventoryIn(BaseModel):
    vaccine_id: int
    batch_no: Optional[str] = None
    quantity: Optional[int] = None
    expiry_date: Optional[date] = None

class AdjustIn(BaseModel):
    delta: int = 0

# Appointments
class AppointmentIn(BaseModel):
    patient_id: int
    vaccine_id: int
    appointment_date: Optional[str] = None
    center_id: Optional[int] = None
    dose_no: Optional[int] = None
    note: Optional[str] = None

class StatusIn(BaseModel):
    status: str

class AssignIn(BaseModel):
    staff_id: Optional[int] = None

class CompleteIn(BaseModel):
    dose_no: Optional[int] = None

# Vaccination records
class RecordUpdateIn(BaseModel):
    dose_no: Optional[int] = None
    given_on: Optional[datetime] = None

# Feedback
class ReplyIn(BaseModel):
    reply: Optional[str] = None

class FeedbackOut(BaseModel):
    id: int
    user_id: int
    type: Optional[str]
    appointment_id: Optional[int]
    center_id: Optional[int]
    rating: Optional[int]
    message: str
    attachment_path: Optional[str]
    status: Optional[str]
    admin_reply: Optional[str]
    created_at: Optional[datetime]
    class Config:
        from_attributes = True

# Notifications
class NotifyIn(BaseModel):
    audience: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    user_id: Optional[int] = None

class NotificationOut(BaseModel):
    id: int
    user_id: int
    title: Optional[str]
    message: Optional[str]
    is_read: bool
    created_at: Optional[datetime]
    class Config:
        from_attributes = True
